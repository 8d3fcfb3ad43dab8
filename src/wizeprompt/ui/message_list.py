"""
Server-side MessageList: ordered, append-only messages with a sender avatar
per role, plus the auto-scroll state the rendered page acts on.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from wizeprompt.models.message import MessageRole

from .rendering import render


@dataclass(frozen=True)
class MessageItem:
    role: str
    content: str
    sender_image: str | None


def _field(message: Any, name: str) -> Any:
    if isinstance(message, Mapping):
        return message.get(name)
    return getattr(message, name, None)


def _role_value(role: Any) -> str:
    return role.value if isinstance(role, MessageRole) else str(role)


class MessageList:
    """
    Props: messages, user_image, provider_image.

    The only transient state is scrolling: `auto_scroll` is armed on mount and
    by `scroll_to_bottom()`, consumed by the next scroll; every mount or append
    scrolls to the newest message.
    """

    def __init__(self, messages: Iterable[Any], user_image: str | None, provider_image: str | None):
        self.messages = list(messages)
        self.user_image = user_image
        self.provider_image = provider_image
        self.auto_scroll = True
        self.scroll_count = 0
        self._mounted = False

    def sender_image(self, message: Any) -> str | None:
        if _role_value(_field(message, "role")) == MessageRole.USER.value:
            return self.user_image
        return self.provider_image

    def items(self) -> list[MessageItem]:
        return [
            MessageItem(
                role=_role_value(_field(m, "role")),
                content=_field(m, "content") or "",
                sender_image=self.sender_image(m),
            )
            for m in self.messages
        ]

    def mount(self) -> None:
        self._mounted = True
        self._scroll()

    def append(self, message: Any) -> None:
        self.messages.append(message)
        if self._mounted:
            self._scroll()

    def scroll_to_bottom(self) -> None:
        """The explicit "scroll to bottom" affordance."""
        self.auto_scroll = True
        self._scroll()

    def _scroll(self) -> None:
        self.scroll_count += 1
        self.auto_scroll = False

    def render(self) -> str:
        if not self._mounted:
            self.mount()
        return render("message_list.html", items=self.items(), scroll_on_load=True)
