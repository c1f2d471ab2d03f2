"""Core models for request/response handling."""

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.events import APIGatewayProxyEvent
from app.multipart.decoder import parse_header_params


class RawRequest(BaseModel):
    """Transport-neutral view of an upload request. Header names are lower-cased."""

    body: bytes | str = b""
    is_base64_encoded: bool = False
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("headers", mode="before")
    @classmethod
    def normalize_headers(cls, value: Any) -> dict[str, str]:
        if not value:
            return {}
        return {str(name).lower(): val for name, val in dict(value).items() if val is not None}

    @field_validator("body", mode="before")
    @classmethod
    def default_body(cls, value: Any) -> bytes | str:
        return b"" if value is None else value

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    @classmethod
    def from_event(cls, event: APIGatewayProxyEvent) -> "RawRequest":
        """Build a request from an API Gateway proxy event."""
        return cls(body=event.body, is_base64_encoded=event.isBase64Encoded, headers=event.flat_headers())


@dataclass(frozen=True)
class Part:
    """One part of a multipart body: its raw header block and exact body bytes."""

    headers: str
    body: bytes

    @cached_property
    def fields(self) -> dict[str, str]:
        """Header fields keyed by lower-cased name. Folded continuation lines are joined."""
        parsed: dict[str, str] = {}
        last: str | None = None
        for line in self.headers.split("\r\n"):
            if not line:
                continue
            if line[0] in " \t" and last is not None:
                parsed[last] = f"{parsed[last]} {line.strip()}"
                continue
            name, sep, value = line.partition(":")
            if not sep:
                continue
            last = name.strip().lower()
            parsed[last] = value.strip()
        return parsed

    @property
    def content_type(self) -> str | None:
        return self.fields.get("content-type")

    @property
    def disposition(self) -> dict[str, str]:
        """Content-Disposition parameters (name, filename, ...)."""
        raw = self.fields.get("content-disposition")
        if raw is None:
            return {}
        _, params = parse_header_params(raw)
        return params

    @property
    def name(self) -> str | None:
        return self.disposition.get("name")

    @property
    def filename(self) -> str | None:
        return self.disposition.get("filename")


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a successful upload."""

    id: str
    byte_length: int
    content_type: str
    receipt: Any


class UploadResponse(BaseModel):
    """Body returned to the caller after a successful upload."""

    status: Literal["uploaded"] = "uploaded"
    uuid: str


class ProxyResponse(BaseModel):
    """Response in API Gateway proxy integration shape."""

    statusCode: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""
