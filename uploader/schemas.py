"""Pydantic request/response schemas for the Cloudflare Stream API."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from uploader.errors import ProviderError

T = TypeVar("T")


class VideoMeta(BaseModel):
    """Metadata attached to a copied video."""

    name: str


class VideoRequest(BaseModel):
    """Request body for POST /stream/copy."""

    url: str
    meta: VideoMeta


class Video(BaseModel):
    """A Stream video asset as returned by /stream/copy and /stream/{uid}."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    uid: str
    preview: str
    ready_to_stream: bool = Field(alias="readyToStream")


def _message_text(entry: Any) -> str:
    # Cloudflare sends {"code": 10005, "message": "..."}; keep plain strings as-is.
    if isinstance(entry, dict):
        code = entry.get("code")
        message = entry.get("message", "")
        return f"{code}: {message}" if code is not None else str(message)
    return str(entry)


class CloudflareResponse(BaseModel, Generic[T]):
    """Envelope wrapping every Cloudflare API response."""

    result: T | None = None
    success: bool
    errors: list[str] = []
    messages: list[str] = []

    @field_validator("errors", "messages", mode="before")
    @classmethod
    def _normalize_messages(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [_message_text(entry) for entry in value]
        return value

    def unwrap(self) -> T:
        """Return result, or raise ProviderError if the call failed or returned nothing."""
        if not self.success:
            raise ProviderError("Cloudflare request failed", self.errors)
        if self.result is None:
            raise ProviderError("Cloudflare request failed: malformed success response")
        return self.result
