"""Shared fakes: a discovery service and remote services behind httpx.MockTransport."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx
import pytest

from servicecall import EndpointCache, ServiceCall, ServiceCallSettings

DISCOVERY_HOST = "https://discovery.test/"
SERVICE_HOST = "https://services.test"

Handler = Callable[[httpx.Request], httpx.Response]


@dataclass
class FakeNetwork:
    """Discovery + remote services.

    - `endpoints` maps `(service, namespace, method)` to the discovery payload.
    - `routes` maps `(VERB, path)` to a handler returning an `httpx.Response`.
    """

    endpoints: dict[tuple[str, str, str], Any] = field(default_factory=dict)
    routes: dict[tuple[str, str], Handler] = field(default_factory=dict)
    discovery_requests: list[httpx.Request] = field(default_factory=list)
    service_requests: list[httpx.Request] = field(default_factory=list)
    discovery_status: int = 200

    def register(
        self,
        service: str,
        namespace: str,
        method: str,
        *,
        verb: str,
        path: str,
        handler: Handler,
    ) -> None:
        self.endpoints[(service, namespace, method)] = {
            "baseUrl": SERVICE_HOST,
            "path": path,
            "httpMethod": verb,
        }
        self.routes[(verb.upper(), path)] = handler

    def route(self, verb: str, path: str, handler: Handler) -> None:
        self.routes[(verb.upper(), path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "discovery.test":
            self.discovery_requests.append(request)
            params = request.url.params
            key = (params.get("service"), params.get("namespace"), params.get("method"))
            if self.discovery_status >= 400 or key not in self.endpoints:
                return httpx.Response(self.discovery_status if self.discovery_status >= 400 else 404, json={"message": "Not found"})
            return httpx.Response(200, json=self.endpoints[key])

        self.service_requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Route not found"})
        return handler(request)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8")) if request.content else None


@pytest.fixture
def settings() -> ServiceCallSettings:
    return ServiceCallSettings(
        _env_file=None,
        discovery_host=DISCOVERY_HOST,
        service_name="orders",
        service_secret="s3cret",
    )


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def cache() -> EndpointCache:
    return EndpointCache()


@pytest.fixture
def make_client(settings: ServiceCallSettings, network: FakeNetwork, cache: EndpointCache):
    def factory(client_settings: ServiceCallSettings | None = None, **kwargs: Any) -> ServiceCall:
        kwargs.setdefault("cache", cache)
        kwargs.setdefault("http_client", httpx.AsyncClient(transport=httpx.MockTransport(network.handle)))
        return ServiceCall(client_settings or settings, **kwargs)

    return factory
