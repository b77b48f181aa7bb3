"""Contract of the remote function SDK (out of scope: only its shape matters)."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class FunctionInvoker(Protocol):
    """Asynchronous invocation of named functions owned by other services."""

    async def service_call(self, service: str, function_name: str, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        """Invoke a plain function.

        Returns `{"payload": ..., "functionError": ...}`; `functionError` is
        set when the function itself raised.
        """

        ...

    async def api_call(self, service: str, function_name: str, event: Mapping[str, Any]) -> Mapping[str, Any]:
        """Invoke an API-style function.

        Returns `{"statusCode", "statusMessage", "headers", "body"}`.
        """

        ...
