from typing import Any

from pydantic import ValidationError

from wizeprompt.schemas.parameters import ModelParameters


def parse_model_parameters(payload: Any) -> ModelParameters:
    """
    Validate a generation-parameters payload and return the typed record.

    Raises pydantic.ValidationError when a field is missing, has the wrong type,
    is out of range, or an unknown key is present.
    """
    if isinstance(payload, ModelParameters):
        return payload
    return ModelParameters.model_validate(payload)


def are_valid_model_parameters(payload: Any) -> bool:
    """
    True iff `payload` has user_context, response_context (strings) and a
    temperature in [0, 1], with no other keys. Accepts camelCase or snake_case.
    """
    try:
        parse_model_parameters(payload)
    except ValidationError:
        return False
    return True
