"""Transport contract for the outbound call."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable

from servicecall.core.domain.models import EndpointDescriptor, NormalizedResponse


@dataclass(frozen=True)
class OutboundRequest:
    """A request fully prepared by the normalizer.

    `query` and `body` are mutually exclusive: the verb decides which one
    carries the caller's data.
    """

    descriptor: EndpointDescriptor
    url: str
    method: str
    headers: dict[str, str]
    query: Any = None
    body: Any = None
    path_parameters: Mapping[str, Any] = field(default_factory=dict)
    session: Mapping[str, Any] | None = None


@runtime_checkable
class Transport(Protocol):
    """Sends an `OutboundRequest` and returns the completed exchange.

    Any status code is a completed exchange. Exceptions mean the exchange
    never completed; the normalizer wraps them.
    """

    async def send(self, request: OutboundRequest) -> NormalizedResponse:
        ...
