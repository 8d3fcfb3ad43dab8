"""The `{status, data?, message?}` envelope every service operation returns."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ServiceResponse(BaseModel, Generic[T]):
    status: int
    data: T | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def to_body(self) -> dict[str, Any]:
        """JSON body for HTTP responses: camelCase keys, null fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
