"""Secret store contract."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SecretStore(Protocol):
    """External vault keyed by service identity."""

    async def get_secret(self, name: str) -> Any:
        """Return the stored secret document (expected to carry `apiSecret`)."""

        ...
