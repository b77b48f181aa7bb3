"""Function-invocation transport.

Used for endpoints whose descriptor carries an `invocation_target`. The
request becomes an API-style event for `FunctionInvoker.api_call`; the
invoker's result maps onto `NormalizedResponse`.
"""

from __future__ import annotations

from typing import Any, Mapping

from servicecall.core.domain.models import NormalizedResponse
from servicecall.core.interfaces.invoker import FunctionInvoker
from servicecall.core.interfaces.transport import OutboundRequest, Transport


def build_event(request: OutboundRequest) -> dict[str, Any]:
    event: dict[str, Any] = {
        "requestPath": request.url,
        "path": dict(request.path_parameters),
        "method": request.method,
        "headers": dict(request.headers),
    }
    if request.query is not None:
        event["query"] = request.query
    if request.body is not None:
        event["body"] = request.body
    if request.session:
        event["authorizer"] = {"session": dict(request.session)}
    return event


class InvokerTransport(Transport):
    def __init__(self, invoker: FunctionInvoker) -> None:
        self._invoker = invoker

    async def send(self, request: OutboundRequest) -> NormalizedResponse:
        descriptor = request.descriptor
        result = await self._invoker.api_call(descriptor.service, descriptor.invocation_target, build_event(request))

        if not isinstance(result, Mapping) or "statusCode" not in result:
            raise ValueError(f"Invocation of {descriptor.invocation_target} returned no status code")

        headers = result.get("headers") or {}
        return NormalizedResponse(
            status_code=int(result["statusCode"]),
            status_message=result.get("statusMessage"),
            headers={str(k): str(v) for k, v in headers.items()},
            body=result.get("body"),
        )
