"""Service-call façade.

`ServiceCall` is what applications use: it resolves the logical operation
through the `EndpointResolver`, sends it through the `RequestNormalizer` and
applies the strict or safe status policy.

- `call` / `list` raise `CallError` for any failure, including a remote
  status >= 400.
- `safe_call` / `safe_list` return error-status responses as values; they
  still raise for resolution and transport failures.

Nothing is retried here. Use `should_retry` on the outcome.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

import httpx

from servicecall.adapters.discovery.http import HttpDiscoveryClient
from servicecall.adapters.http_client import build_async_client
from servicecall.adapters.transports.http import HttpTransport
from servicecall.adapters.transports.invoker import InvokerTransport
from servicecall.core.config import ServiceCallSettings
from servicecall.core.domain.errors import CallError, CallErrorCode
from servicecall.core.domain.models import EndpointDescriptor, NormalizedResponse, Session
from servicecall.core.interfaces.discovery import DiscoveryClient
from servicecall.core.interfaces.invoker import FunctionInvoker
from servicecall.core.interfaces.secrets import SecretStore
from servicecall.core.interfaces.transport import Transport
from servicecall.core.services.credentials import CredentialProvider
from servicecall.core.services.endpoint_resolver import EndpointCache, EndpointResolver
from servicecall.core.services.pagination import PaginationAggregator
from servicecall.core.services.request_normalizer import RequestNormalizer
from servicecall.core.services.retry import should_retry

NO_RESPONSE_BODY = "No response body"


def extract_error_message(body: Any) -> str:
    """Best-effort message of an error response body."""

    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    if isinstance(body, (Mapping, list)) and body:
        return json.dumps(body, ensure_ascii=False, separators=(",", ":"), default=str)
    return NO_RESPONSE_BODY


class ServiceCall:
    """Invoke another service's operation by `(service, namespace, method)`.

    Dependencies default to the HTTP variants built from `settings`; pass
    `discovery`, `transport` or `invoker` to swap them. A `FunctionInvoker`
    enables the invocation transport for endpoints that carry an
    invocation target.
    """

    error_codes = CallErrorCode

    def __init__(
        self,
        settings: ServiceCallSettings | None = None,
        *,
        session: Session | None = None,
        discovery: DiscoveryClient | None = None,
        transport: Transport | None = None,
        invoker: FunctionInvoker | None = None,
        secret_store: SecretStore | None = None,
        cache: EndpointCache | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or ServiceCallSettings()
        self.session = session
        self._api_key_user: str | None = None

        self._owns_client = http_client is None
        self._http_client = http_client or build_async_client(self._settings)

        self._resolver = EndpointResolver(
            discovery or HttpDiscoveryClient(self._settings, self._http_client),
            cache,
        )
        self._normalizer = RequestNormalizer(
            transport or HttpTransport(self._http_client),
            CredentialProvider(self._settings, secret_store),
            invoker_transport=InvokerTransport(invoker) if invoker is not None else None,
        )

    @property
    def settings(self) -> ServiceCallSettings:
        return self._settings

    @property
    def resolver(self) -> EndpointResolver:
        return self._resolver

    async def __aenter__(self) -> "ServiceCall":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    def set_user_id(self, user_id: str | None) -> "ServiceCall":
        """Add `_user-<user_id>` to the api-key header of the next request only."""

        self._api_key_user = user_id
        return self

    async def resolve(self, service: str, namespace: str, method: str) -> EndpointDescriptor:
        return await self._resolver.resolve(service, namespace, method)

    async def _invoke(
        self,
        service: str,
        namespace: str,
        method: str,
        request_data: Any = None,
        request_headers: Mapping[str, Any] | None = None,
        path_parameters: Mapping[str, Any] | None = None,
    ) -> NormalizedResponse:
        descriptor = await self._resolver.resolve(service, namespace, method)

        api_key_user, self._api_key_user = self._api_key_user, None

        return await self._normalizer.invoke(
            descriptor,
            request_data,
            request_headers,
            path_parameters,
            session=self.session,
            api_key_user=api_key_user,
        )

    async def call(
        self,
        service: str,
        namespace: str,
        method: str,
        request_data: Any = None,
        request_headers: Mapping[str, Any] | None = None,
        path_parameters: Mapping[str, Any] | None = None,
    ) -> NormalizedResponse:
        """Strict mode: raise `CallError` when the remote answers >= 400."""

        response = await self._invoke(service, namespace, method, request_data, request_headers, path_parameters)

        if response.status_code >= 400:
            raise CallError.remote_failed(response.status_code, extract_error_message(response.body))

        return response

    async def safe_call(
        self,
        service: str,
        namespace: str,
        method: str,
        request_data: Any = None,
        request_headers: Mapping[str, Any] | None = None,
        path_parameters: Mapping[str, Any] | None = None,
    ) -> NormalizedResponse:
        """Safe mode: error statuses come back as regular responses."""

        return await self._invoke(service, namespace, method, request_data, request_headers, path_parameters)

    async def list(
        self,
        service: str,
        namespace: str,
        request_data: Any = None,
        path_parameters: Mapping[str, Any] | None = None,
        page_size: int | None = None,
    ) -> NormalizedResponse:
        """Fetch every page of `service.namespace.list` into one response."""

        aggregator = PaginationAggregator(self.call)
        return await aggregator.collect(
            service,
            namespace,
            request_data,
            path_parameters,
            page_size=page_size or self._settings.default_page_size,
        )

    async def safe_list(
        self,
        service: str,
        namespace: str,
        request_data: Any = None,
        path_parameters: Mapping[str, Any] | None = None,
        page_size: int | None = None,
    ) -> NormalizedResponse:
        """Like `list`, but returns the first failing page instead of raising."""

        aggregator = PaginationAggregator(self.safe_call, safe_mode=True)
        return await aggregator.collect(
            service,
            namespace,
            request_data,
            path_parameters,
            page_size=page_size or self._settings.default_page_size,
        )

    @staticmethod
    def should_retry(outcome: Any = None) -> bool:
        return should_retry(outcome)
