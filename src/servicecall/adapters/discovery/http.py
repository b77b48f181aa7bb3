"""HTTP discovery client.

`GET {discovery_host}api/endpoint?service=..&namespace=..&method=..`

- 2xx with a complete payload -> `EndpointDescriptor`.
- status >= 400 or incomplete payload -> EndpointNotFound.
- network error / timeout -> EndpointLookupFailed.
- no (or non-http) discovery host -> DiscoveryConfigInvalid, before any I/O.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from servicecall.adapters.discovery.models import DiscoveryPayload
from servicecall.adapters.http_client import build_async_client, decode_body
from servicecall.core.config import ServiceCallSettings
from servicecall.core.domain.errors import CallError
from servicecall.core.domain.models import EndpointDescriptor
from servicecall.core.interfaces.discovery import DiscoveryClient

ENDPOINT_PATH = "api/endpoint"
SETTING_NAME = "discovery_host"


class HttpDiscoveryClient(DiscoveryClient):
    def __init__(self, settings: ServiceCallSettings, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._client = client

    @property
    def endpoint(self) -> str:
        host = self._settings.discovery_host
        if not host:
            raise CallError.discovery_config_invalid(f"Missing endpoint setting '{SETTING_NAME}'")
        if not host.startswith(("http://", "https://")):
            raise CallError.discovery_config_invalid(f"Invalid endpoint setting '{SETTING_NAME}': {host}")
        if not host.endswith("/"):
            host = f"{host}/"
        return f"{host}{ENDPOINT_PATH}"

    async def fetch(self, service: str, namespace: str, method: str) -> EndpointDescriptor:
        url = self.endpoint

        try:
            response = await self._request(url, {"service": service, "namespace": namespace, "method": method})
        except httpx.HTTPError as exc:
            logger.warning("Discovery request for {}.{}.{} failed: {}", service, namespace, method, exc)
            raise CallError.endpoint_lookup_failed(exc) from exc

        if response.status_code >= 400:
            raise CallError.endpoint_not_found(
                f"Endpoint not found: {service} - {namespace} - {method}",
                status_code=response.status_code,
            )

        data = decode_body(response)
        if not isinstance(data, dict):
            raise CallError.endpoint_not_found(
                f"Endpoint not found: {service} - {namespace} - {method} (unexpected discovery payload)"
            )

        try:
            payload = DiscoveryPayload.model_validate(data)
        except ValidationError as exc:
            raise CallError.endpoint_not_found(
                f"Endpoint not found: {service} - {namespace} - {method} ({exc.error_count()} invalid fields)"
            ) from exc

        return payload.to_descriptor(service, namespace, method)

    async def _request(self, url: str, params: dict[str, Any]) -> httpx.Response:
        headers = {"content-type": "application/json"}
        if self._client is not None:
            return await self._client.get(url, params=params, headers=headers)
        async with build_async_client(self._settings) as client:
            return await client.get(url, params=params, headers=headers)
