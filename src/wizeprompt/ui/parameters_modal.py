"""
ParametersModal: the per-conversation "Conversation Context" editor.

It keeps the three editable fields and the "Use Global GPT Context" toggle.
With the toggle on, the user's global context strings are prepended to the
typed text and the global temperature replaces the local one. It never
persists anything itself: `save()` hands the resolved ModelParameters to the
`save_parameters` callback.
"""

import inspect
from typing import Any, Callable

from wizeprompt.schemas.parameters import (
    GlobalModelParameters,
    ModelParameters,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    TEMPERATURE_STEP,
)

from .rendering import render

SaveCallback = Callable[[ModelParameters], Any]
OpenChangeCallback = Callable[[bool], Any]


def _join_context(*parts: str | None) -> str:
    return " ".join(part for part in parts if part)


def _snap_temperature(value: float) -> float:
    if not TEMPERATURE_MIN <= value <= TEMPERATURE_MAX:
        raise ValueError(f"temperature must be between {TEMPERATURE_MIN} and {TEMPERATURE_MAX}")
    return round(round(value / TEMPERATURE_STEP) * TEMPERATURE_STEP, 1)


class ParametersModal:

    def __init__(
        self,
        *,
        user_context: str = "",
        response_context: str = "",
        temperature: float = 0.5,
        save_parameters: SaveCallback | None = None,
        on_open_change: OpenChangeCallback | None = None,
        global_parameters: GlobalModelParameters | None = None,
        is_open: bool = False,
        action: str = "",
    ):
        self.user_context = user_context
        self.response_context = response_context
        self.temperature = temperature
        self.save_parameters = save_parameters
        self.on_open_change = on_open_change
        self.global_parameters = global_parameters
        self.is_open = is_open
        self.action = action

        # local state
        self.typed_user_context = user_context
        self.typed_response_context = response_context
        self.typed_temperature = temperature
        self.use_global_context = False

    @classmethod
    def from_stored(cls, parameters: dict[str, Any] | None, **kwargs: Any) -> "ParametersModal":
        """Seed the props from a conversation's stored (camelCase) parameters."""
        stored = parameters or {}
        return cls(
            user_context=stored.get("userContext") or "",
            response_context=stored.get("responseContext") or "",
            temperature=stored.get("temperature", 0.5),
            **kwargs,
        )

    # --- open state ---

    def set_open(self, is_open: bool) -> None:
        self.is_open = is_open
        if self.on_open_change is not None:
            self.on_open_change(is_open)

    def open(self) -> None:
        self.set_open(True)

    def close(self) -> None:
        self.set_open(False)

    # --- edits ---

    def edit_user_context(self, text: str) -> None:
        self.typed_user_context = text

    def edit_response_context(self, text: str) -> None:
        self.typed_response_context = text

    def set_temperature(self, value: float) -> None:
        """Slider edit; values outside [0, 1] raise ValueError, others snap to 0.1."""
        self.typed_temperature = _snap_temperature(float(value))

    def toggle_global_context(self, selected: bool) -> None:
        self.use_global_context = selected

    # --- resolution ---

    def resolved(self) -> ModelParameters:
        if not self.use_global_context:
            return ModelParameters(
                user_context=self.typed_user_context,
                response_context=self.typed_response_context,
                temperature=self.typed_temperature,
            )
        return self.with_global_context()

    def with_global_context(self) -> ModelParameters:
        """The typed values merged with the global entry, whether or not the toggle is on."""
        globals_ = self.global_parameters or GlobalModelParameters()
        temperature = globals_.temperature if globals_.temperature is not None else self.temperature
        return ModelParameters(
            user_context=_join_context(globals_.user_context, self.typed_user_context),
            response_context=_join_context(globals_.response_context, self.typed_response_context),
            temperature=temperature,
        )

    async def save(self) -> Any:
        """Pass the resolved parameters to `save_parameters`, then close."""
        result = None
        if self.save_parameters is not None:
            result = self.save_parameters(self.resolved())
            if inspect.isawaitable(result):
                result = await result
        self.close()
        return result

    def cancel(self) -> None:
        self.close()

    def render(self, error: str | None = None) -> str:
        """Fields hold the typed values; the global merge appears only in the preview block."""
        return render(
            "parameters_modal.html",
            modal=self,
            preview=self.with_global_context() if self.global_parameters is not None else None,
            temperature_min=TEMPERATURE_MIN,
            temperature_max=TEMPERATURE_MAX,
            temperature_step=TEMPERATURE_STEP,
            error=error,
        )
