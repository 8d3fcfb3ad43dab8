"""
Generation-parameter records.

    ModelParameters        per-conversation settings, every field required
    GlobalModelParameters  per-model user defaults, every field optional
    GlobalParameters       model name -> GlobalModelParameters

All three serialize with camelCase keys (userContext, responseContext,
temperature) and accept either spelling on input.
"""

import json
from typing import Annotated, Any

from pydantic import BeforeValidator, ConfigDict, Field, RootModel, StrictStr, field_validator

from .base import CamelModel

TEMPERATURE_MIN = 0.0
TEMPERATURE_MAX = 1.0
TEMPERATURE_STEP = 0.1


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("temperature must be a number")
    return value


Temperature = Annotated[
    float,
    BeforeValidator(_reject_bool),
    Field(ge=TEMPERATURE_MIN, le=TEMPERATURE_MAX),
]


class ModelParameters(CamelModel):
    model_config = ConfigDict(extra="forbid")

    user_context: StrictStr
    response_context: StrictStr
    temperature: Temperature

    def to_stored(self) -> dict[str, Any]:
        """The JSON shape kept in `conversations.parameters`."""
        return self.model_dump(by_alias=True)


class GlobalModelParameters(CamelModel):
    model_config = ConfigDict(extra="forbid")

    user_context: StrictStr | None = None
    response_context: StrictStr | None = None
    temperature: Temperature | None = None

    def to_stored(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _load_stored_mapping(value: Any) -> Any:
    # Older rows hold the mapping as JSON text; NULL means "no defaults".
    if value is None:
        return {}
    if isinstance(value, (str, bytes)):
        return json.loads(value) if value.strip() else {}
    return value


class GlobalParameters(RootModel[dict[str, GlobalModelParameters]]):
    root: dict[str, GlobalModelParameters] = Field(default_factory=dict)

    @field_validator("root", mode="before")
    @classmethod
    def parse_legacy_text(cls, value: Any) -> Any:
        return _load_stored_mapping(value)

    @classmethod
    def entry_for(cls, stored: Any, model_name: str) -> GlobalModelParameters | None:
        """
        Validate only the stored entry for `model_name`.

        Entries kept for other (possibly retired) models are not looked at, so a
        stale one cannot break conversations on this model. Raises ValueError when
        the stored value is not a mapping or this model's entry is malformed.
        """
        mapping = _load_stored_mapping(stored)
        if not isinstance(mapping, dict):
            raise ValueError("global parameters must be a mapping of model name to parameters")
        entry = mapping.get(model_name)
        if entry is None:
            return None
        return GlobalModelParameters.model_validate(entry)

    def for_model(self, model_name: str) -> GlobalModelParameters | None:
        return self.root.get(model_name)

    def to_stored(self) -> dict[str, Any]:
        return {name: params.to_stored() for name, params in self.root.items()}
