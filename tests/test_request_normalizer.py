"""Request assembly, header composition and transport failure wrapping."""

from __future__ import annotations

from typing import Any, Mapping

import httpx
import pytest

from servicecall import CallError, CallErrorCode, CallErrorKind, EndpointDescriptor, NormalizedResponse, Session
from servicecall.adapters.transports import HttpTransport, InvokerTransport
from servicecall.core.interfaces.transport import OutboundRequest
from servicecall.core.services.credentials import CredentialProvider
from servicecall.core.services.request_normalizer import (
    RequestNormalizer,
    place_request_data,
    substitute_path,
)

from conftest import request_json


def _descriptor(verb: str = "GET", path: str = "/api/items", **kwargs: Any) -> EndpointDescriptor:
    return EndpointDescriptor(
        service="catalog",
        namespace="item",
        method="get",
        base_url="https://catalog.test",
        path=path,
        http_method=verb,
        **kwargs,
    )


class RecordingTransport:
    def __init__(self, response: NormalizedResponse | None = None, error: Exception | None = None) -> None:
        self.requests: list[OutboundRequest] = []
        self._response = response or NormalizedResponse(status_code=200, body={})
        self._error = error

    async def send(self, request: OutboundRequest) -> NormalizedResponse:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return self._response


class RecordingInvoker:
    def __init__(self, result: Any) -> None:
        self.result = result
        self.events: list[tuple[str, str, Mapping[str, Any]]] = []

    async def service_call(self, service: str, function_name: str, payload: Mapping[str, Any]) -> Any:
        raise AssertionError("not used by the transport")

    async def api_call(self, service: str, function_name: str, event: Mapping[str, Any]) -> Any:
        self.events.append((service, function_name, event))
        return self.result


@pytest.fixture
def credentials(settings) -> CredentialProvider:
    return CredentialProvider(settings)


class TestSubstitutePath:
    def test_replaces_every_parameter(self):
        path = substitute_path("/alarms/{alarmName}/state/{alarmState}", {"alarmName": "foo", "alarmState": "ok"})

        assert path == "/alarms/foo/state/ok"

    def test_values_are_string_coerced(self):
        assert substitute_path("/orders/{id}", {"id": 42}) == "/orders/42"

    def test_unmatched_placeholders_are_left_alone(self):
        assert substitute_path("/orders/{id}/items/{itemId}", {"id": 1, "other": 2}) == "/orders/1/items/{itemId}"

    def test_no_parameters(self):
        assert substitute_path("/orders/{id}", None) == "/orders/{id}"


@pytest.mark.parametrize(
    "verb, expected",
    [
        ("GET", ({"a": 1}, None)),
        ("delete", ({"a": 1}, None)),
        ("POST", (None, {"a": 1})),
        ("put", (None, {"a": 1})),
        ("PATCH", (None, {"a": 1})),
        ("HEAD", (None, None)),
    ],
)
def test_place_request_data(verb, expected):
    assert place_request_data(verb, {"a": 1}) == expected


class TestHeaders:
    @pytest.mark.asyncio
    async def test_defaults_and_credentials(self, credentials):
        normalizer = RequestNormalizer(RecordingTransport(), credentials)

        headers = await normalizer.build_headers()

        assert headers == {
            "content-type": "application/json",
            "x-api-key": "service-orders",
            "x-api-secret": "s3cret",
        }

    @pytest.mark.asyncio
    async def test_session_and_api_key_user(self, credentials):
        normalizer = RequestNormalizer(RecordingTransport(), credentials)

        headers = await normalizer.build_headers(
            session=Session(client_code="acme", user_id="u-1"),
            api_key_user="u-9",
        )

        assert headers["x-client"] == "acme"
        assert headers["x-user"] == "u-1"
        assert headers["x-api-key"] == "service-orders_user-u-9"

    @pytest.mark.asyncio
    async def test_partial_session_only_adds_present_fields(self, credentials):
        normalizer = RequestNormalizer(RecordingTransport(), credentials)

        headers = await normalizer.build_headers(session=Session(client_code="acme"))

        assert headers["x-client"] == "acme"
        assert "x-user" not in headers

    @pytest.mark.asyncio
    async def test_caller_headers_win(self, credentials):
        normalizer = RequestNormalizer(RecordingTransport(), credentials)

        headers = await normalizer.build_headers(
            {"content-type": "text/plain", "x-client": "other", "x-page": 2},
            session=Session(client_code="acme"),
        )

        assert headers["content-type"] == "text/plain"
        assert headers["x-client"] == "other"
        assert headers["x-page"] == "2"


class TestInvoke:
    @pytest.mark.asyncio
    async def test_get_puts_data_in_query(self, credentials):
        transport = RecordingTransport()
        normalizer = RequestNormalizer(transport, credentials)

        await normalizer.invoke(_descriptor("get", "/api/items/{id}"), {"a": 1}, None, {"id": 7})

        request = transport.requests[0]
        assert request.url == "https://catalog.test/api/items/7"
        assert request.method == "GET"
        assert request.query == {"a": 1}
        assert request.body is None

    @pytest.mark.asyncio
    async def test_post_puts_data_in_body(self, credentials):
        transport = RecordingTransport()
        normalizer = RequestNormalizer(transport, credentials)

        await normalizer.invoke(_descriptor("POST"), [{"a": 1}])

        assert transport.requests[0].body == [{"a": 1}]
        assert transport.requests[0].query is None

    @pytest.mark.asyncio
    async def test_error_status_is_returned_not_raised(self, credentials):
        failing = NormalizedResponse(status_code=500, status_message="Internal Server Error", body={"message": "x"})
        normalizer = RequestNormalizer(RecordingTransport(failing), credentials)

        response = await normalizer.invoke(_descriptor())

        assert response is failing

    @pytest.mark.asyncio
    async def test_transport_exception_is_wrapped(self, credentials):
        cause = OSError("dns failure")
        normalizer = RequestNormalizer(RecordingTransport(error=cause), credentials)

        with pytest.raises(CallError) as exc_info:
            await normalizer.invoke(_descriptor())

        error = exc_info.value
        assert error.kind is CallErrorKind.REMOTE_CALL_FAILED
        assert error.code == CallErrorCode.REQUEST_LIB_ERROR
        assert error.status_code is None
        assert error.cause is cause

    @pytest.mark.asyncio
    async def test_invocation_target_uses_invoker_transport(self, credentials):
        http = RecordingTransport()
        invoker = RecordingInvoker({"statusCode": 201, "headers": {"x-id": 5}, "body": {"id": 5}})
        normalizer = RequestNormalizer(http, credentials, invoker_transport=InvokerTransport(invoker))

        response = await normalizer.invoke(
            _descriptor("POST", "/api/items/{id}", invocation_target="CreateItem"),
            {"name": "foo"},
            {"x-trace": "t"},
            {"id": 5},
            session=Session(client_code="acme"),
        )

        assert http.requests == []
        service, function_name, event = invoker.events[0]
        assert (service, function_name) == ("catalog", "CreateItem")
        assert event["method"] == "POST"
        assert event["requestPath"] == "https://catalog.test/api/items/5"
        assert event["path"] == {"id": 5}
        assert event["body"] == {"name": "foo"}
        assert "query" not in event
        assert event["headers"]["x-trace"] == "t"
        assert event["authorizer"] == {"session": {"client_code": "acme"}}
        assert response == NormalizedResponse(status_code=201, headers={"x-id": "5"}, body={"id": 5})

    @pytest.mark.asyncio
    async def test_invocation_without_status_is_wrapped(self, credentials):
        invoker = RecordingInvoker({"body": "nope"})
        normalizer = RequestNormalizer(RecordingTransport(), credentials, invoker_transport=InvokerTransport(invoker))

        with pytest.raises(CallError) as exc_info:
            await normalizer.invoke(_descriptor(invocation_target="GetItem"))

        assert exc_info.value.code == CallErrorCode.REQUEST_LIB_ERROR

    @pytest.mark.asyncio
    async def test_invocation_target_falls_back_to_http(self, credentials):
        http = RecordingTransport()
        normalizer = RequestNormalizer(http, credentials)

        await normalizer.invoke(_descriptor(invocation_target="GetItem"))

        assert len(http.requests) == 1


class TestHttpTransport:
    @pytest.mark.asyncio
    async def test_round_trip_preserves_status_headers_and_body(self, credentials):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                202,
                json={"id": 1, "tags": ["a", "b"], "nested": {"ok": True}},
                headers={"x-request-id": "abc-123"},
            )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            normalizer = RequestNormalizer(HttpTransport(client), credentials)
            response = await normalizer.invoke(_descriptor("PUT"), {"name": "x"})

        assert response.status_code == 202
        assert response.status_message == "Accepted"
        assert response.headers["x-request-id"] == "abc-123"
        assert response.body == {"id": 1, "tags": ["a", "b"], "nested": {"ok": True}}

    @pytest.mark.asyncio
    async def test_sends_nested_query_and_headers(self, credentials):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="plain text")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            normalizer = RequestNormalizer(HttpTransport(client), credentials)
            response = await normalizer.invoke(
                _descriptor("GET"),
                {"filters": {"ids": ["x", "y"]}, "limit": 5},
                {"x-trace": "t"},
            )

        request = seen[0]
        assert request.url.params["filters[ids][0]"] == "x"
        assert request.url.params["filters[ids][1]"] == "y"
        assert request.url.params["limit"] == "5"
        assert request.headers["x-api-key"] == "service-orders"
        assert request.headers["x-trace"] == "t"
        assert request.content == b""
        assert response.body == "plain text"

    @pytest.mark.asyncio
    async def test_sends_json_body(self, credentials):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            normalizer = RequestNormalizer(HttpTransport(client), credentials)
            response = await normalizer.invoke(_descriptor("PATCH"), {"name": "é"})

        assert request_json(seen[0]) == {"name": "é"}
        assert seen[0].headers["content-type"] == "application/json"
        assert response.status_code == 204
        assert response.body == ""

    @pytest.mark.asyncio
    async def test_connection_error_is_wrapped(self, credentials):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            normalizer = RequestNormalizer(HttpTransport(client), credentials)
            with pytest.raises(CallError) as exc_info:
                await normalizer.invoke(_descriptor())

        assert exc_info.value.kind is CallErrorKind.REMOTE_CALL_FAILED
        assert exc_info.value.code == CallErrorCode.REQUEST_LIB_ERROR
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
