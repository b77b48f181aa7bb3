"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts and default headers for discovery and remote calls.
- Makes testing easy: pass an `httpx.MockTransport` instead of the network.
"""

from __future__ import annotations

from typing import Any

import httpx

from servicecall.core.config import ServiceCallSettings


def build_async_client(
    settings: ServiceCallSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    Why a builder:
    - Centralizes timeouts/headers so discovery and calls behave the same.
    - `transport` lets tests swap the network for `httpx.MockTransport`.
    """

    settings = settings or ServiceCallSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def decode_body(response: httpx.Response) -> Any:
    """JSON when parseable, else text. Empty content decodes to `""`."""

    if not response.content:
        return ""
    try:
        return response.json()
    except ValueError:
        return response.text
