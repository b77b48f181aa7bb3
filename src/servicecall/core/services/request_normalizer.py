"""Outbound request assembly and response normalization.

The normalizer turns an `EndpointDescriptor` plus caller data into an
`OutboundRequest`, hands it to a transport and returns the completed exchange
as a `NormalizedResponse`. It never decides whether a status is an error;
that belongs to the façade.
"""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from servicecall.core.domain.errors import CallError
from servicecall.core.domain.models import EndpointDescriptor, NormalizedResponse, Session
from servicecall.core.interfaces.transport import OutboundRequest, Transport
from servicecall.core.services.credentials import CredentialProvider

QUERY_VERBS = frozenset({"GET", "DELETE"})
BODY_VERBS = frozenset({"POST", "PUT", "PATCH"})

HEADER_CLIENT = "x-client"
HEADER_USER = "x-user"

DEFAULT_HEADERS = {"content-type": "application/json"}


def substitute_path(path: str, path_parameters: Mapping[str, Any] | None) -> str:
    """Replace `{key}` tokens with their values. Unknown tokens stay as-is."""

    if not path_parameters:
        return path
    for key, value in path_parameters.items():
        path = path.replace(f"{{{key}}}", str(value))
    return path


def place_request_data(http_method: str, request_data: Any) -> tuple[Any, Any]:
    """Return `(query, body)` for the verb; one of them is always None."""

    verb = http_method.upper()
    if verb in QUERY_VERBS:
        return request_data, None
    if verb in BODY_VERBS:
        return None, request_data
    return None, None


def session_headers(session: Session | None) -> dict[str, str]:
    headers: dict[str, str] = {}
    if session is None:
        return headers
    if session.client_code:
        headers[HEADER_CLIENT] = session.client_code
    if session.user_id:
        headers[HEADER_USER] = session.user_id
    return headers


class RequestNormalizer:
    """Builds the request, picks the transport and wraps transport failures."""

    def __init__(
        self,
        http_transport: Transport,
        credentials: CredentialProvider,
        *,
        invoker_transport: Transport | None = None,
    ) -> None:
        self._http_transport = http_transport
        self._invoker_transport = invoker_transport
        self._credentials = credentials

    async def build_headers(
        self,
        request_headers: Mapping[str, Any] | None = None,
        *,
        session: Session | None = None,
        api_key_user: str | None = None,
    ) -> dict[str, str]:
        """Merge, lowest precedence first: defaults, credentials, session, caller."""

        headers: dict[str, str] = dict(DEFAULT_HEADERS)
        headers.update(await self._credentials.headers(api_key_user))
        headers.update(session_headers(session))
        if request_headers:
            headers.update({str(k): str(v) for k, v in request_headers.items()})
        return headers

    def _transport_for(self, descriptor: EndpointDescriptor) -> Transport:
        if descriptor.invocation_target and self._invoker_transport is not None:
            return self._invoker_transport
        return self._http_transport

    async def invoke(
        self,
        descriptor: EndpointDescriptor,
        request_data: Any = None,
        request_headers: Mapping[str, Any] | None = None,
        path_parameters: Mapping[str, Any] | None = None,
        *,
        session: Session | None = None,
        api_key_user: str | None = None,
    ) -> NormalizedResponse:
        headers = await self.build_headers(request_headers, session=session, api_key_user=api_key_user)
        query, body = place_request_data(descriptor.http_method, request_data)

        request = OutboundRequest(
            descriptor=descriptor,
            url=f"{descriptor.base_url}{substitute_path(descriptor.path, path_parameters)}",
            method=descriptor.http_method.upper(),
            headers=headers,
            query=query,
            body=body,
            path_parameters=dict(path_parameters or {}),
            session=session.model_dump(exclude_none=True) if session is not None else None,
        )

        logger.debug("{} {} ({})", request.method, request.url, descriptor.cache_key)

        try:
            return await self._transport_for(descriptor).send(request)
        except CallError:
            raise
        except Exception as exc:
            logger.warning("Request to {} failed before completing: {}", request.url, exc)
            raise CallError.request_failed(exc) from exc
