"""Discovery through function invocation.

Invokes `discovery.GetEndpoint` with `{service, namespace, method}`. The
invoker result carries `payload` (`baseUrl`, `path`, `method`,
`errorMessage`) and, when the function itself raised, `functionError`.
"""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger
from pydantic import ValidationError

from servicecall.adapters.discovery.models import DiscoveryPayload
from servicecall.core.domain.errors import CallError
from servicecall.core.domain.models import EndpointDescriptor
from servicecall.core.interfaces.discovery import DiscoveryClient
from servicecall.core.interfaces.invoker import FunctionInvoker

DISCOVERY_SERVICE = "discovery"
DISCOVERY_FUNCTION = "GetEndpoint"


class InvokerDiscoveryClient(DiscoveryClient):
    def __init__(
        self,
        invoker: FunctionInvoker | None,
        *,
        service: str = DISCOVERY_SERVICE,
        function_name: str = DISCOVERY_FUNCTION,
    ) -> None:
        self._invoker = invoker
        self._service = service
        self._function_name = function_name

    async def fetch(self, service: str, namespace: str, method: str) -> EndpointDescriptor:
        if self._invoker is None:
            raise CallError.discovery_config_invalid("Missing function invoker for discovery")

        try:
            result = await self._invoker.service_call(
                self._service,
                self._function_name,
                {"service": service, "namespace": namespace, "method": method},
            )
        except CallError:
            raise
        except Exception as exc:
            logger.warning("Discovery invocation for {}.{}.{} failed: {}", service, namespace, method, exc)
            raise CallError.endpoint_lookup_failed(exc) from exc

        raw: Any = result.get("payload") if isinstance(result, Mapping) else None
        function_error = result.get("functionError") if isinstance(result, Mapping) else None

        try:
            payload = DiscoveryPayload.model_validate(dict(raw) if isinstance(raw, Mapping) else {})
        except ValidationError as exc:
            raise CallError.endpoint_not_found(
                f"Service Discovery returned an invalid endpoint for {service} - {namespace} - {method}"
            ) from exc

        error = payload.error_message or function_error
        if error:
            raise CallError.endpoint_not_found(f"Service Discovery fails getting endpoint. Error: {error}")

        return payload.to_descriptor(service, namespace, method)
