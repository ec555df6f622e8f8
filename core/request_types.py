"""Shared request data types."""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import InvalidProxyRequest


class ProxyRequest(BaseModel):
    """Inbound `/proxy` payload describing the call to make on the caller's behalf."""

    model_config = ConfigDict(extra="ignore")

    method: str = "GET"
    url: str = ""
    headers: dict[str, str | int | float] = Field(default_factory=dict)
    body: str | None = None

    @field_validator("method", mode="before")
    @classmethod
    def default_method(cls, v: Any) -> Any:
        return v or "GET"

    @field_validator("url", mode="before")
    @classmethod
    def default_url(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("headers", mode="before")
    @classmethod
    def default_headers(cls, v: Any) -> Any:
        return v or {}

    @field_validator("body", mode="before")
    @classmethod
    def empty_body_is_none(cls, v: Any) -> Any:
        return v or None

    @classmethod
    def parse(cls, payload: Any) -> "ProxyRequest":
        """Validate a decoded JSON payload."""
        if not isinstance(payload, dict):
            raise InvalidProxyRequest("Proxy payload must be a JSON object")
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise InvalidProxyRequest(f"Invalid proxy payload: {errors}") from e


@dataclass(frozen=True)
class PreparedRequest:
    """Prepared data for an upstream request."""

    method: str
    url: str
    headers: dict[str, str]
    body: str | None = None


@dataclass(frozen=True)
class UpstreamResponse:
    """Response collected from the bank, relayed unmodified."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def to_envelope(self) -> dict[str, Any]:
        return {"status": self.status, "headers": self.headers, "body": self.body}
