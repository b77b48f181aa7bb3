"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict, self-documented structures (Field) for what flows between the
  resolver, the normalizer and the callers.
- Frozen models: a resolved endpoint or a received response is never mutated
  after creation; derived values go through `model_copy(update=...)`.

Note:
- These models describe *what* the data is, not *how* it is fetched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class EndpointDescriptor(BaseModel):
    """Physical target of a logical `(service, namespace, method)` operation.

    `base_url` is empty when discovery hands back a single absolute `endpoint`;
    in that case `path` holds the whole URL.
    """

    model_config = ConfigDict(frozen=True)

    service: str = Field(..., min_length=1, description="Logical service name.")
    namespace: str = Field(..., min_length=1, description="Namespace (resource) inside the service.")
    method: str = Field(..., min_length=1, description="Logical method name (e.g. 'list', 'get').")
    base_url: str = Field(
        default="",
        description="Scheme + host (+ optional stage prefix) of the target service.",
    )
    path: str = Field(
        ...,
        min_length=1,
        description="Request path; may contain `{placeholder}` tokens.",
    )
    http_method: str = Field(
        ...,
        min_length=1,
        description="HTTP verb, upper-cased.",
    )
    invocation_target: str | None = Field(
        default=None,
        description="Opaque function name for the invocation transport, if any.",
    )

    @property
    def cache_key(self) -> str:
        return build_cache_key(self.service, self.namespace, self.method)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{self.path}"


class NormalizedResponse(BaseModel):
    """Uniform shape of every completed remote exchange, success or failure."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=0, description="HTTP status code.")
    status_message: str | None = Field(default=None, description="Reason phrase, if provided.")
    headers: dict[str, str] = Field(default_factory=dict, description="Response headers.")
    body: Any = Field(default=None, description="Decoded body: object, array or string.")

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def to_dict(self) -> dict[str, Any]:
        """External `{statusCode, statusMessage, headers, body}` shape."""

        return {
            "statusCode": self.status_code,
            "statusMessage": self.status_message,
            "headers": dict(self.headers),
            "body": self.body,
        }


class Session(BaseModel):
    """Caller session; when attached, its fields become request headers."""

    client_code: str | None = Field(default=None, description="Tenant/client code of the session.")
    user_id: str | None = Field(default=None, description="Identifier of the acting user.")


@dataclass
class PaginationState:
    """Cursor and accumulator of one `list` invocation. Discarded afterwards."""

    page_size: int
    page: int = 1
    items: list[Any] = field(default_factory=list)
    last_response: NormalizedResponse | None = None


def build_cache_key(service: str, namespace: str, method: str) -> str:
    return f"{service}.{namespace}.{method}"
