"""Discovery contract.

Why Protocol:
- Defines a structural contract (duck typing) without rigid inheritance.
- HTTP discovery, function-invocation discovery or a test fake are
  interchangeable for the resolver.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from servicecall.core.domain.models import EndpointDescriptor


@runtime_checkable
class DiscoveryClient(Protocol):
    """Minimal contract for an endpoint lookup.

    Design rules:
    - `fetch` is asynchronous because it performs I/O.
    - Raises `CallError` (DiscoveryConfigInvalid, EndpointNotFound or
      EndpointLookupFailed); never returns a partial descriptor.
    """

    async def fetch(self, service: str, namespace: str, method: str) -> EndpointDescriptor:
        """Translate a logical operation into its physical endpoint."""

        ...
