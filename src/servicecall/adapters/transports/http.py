"""HTTP transport over httpx.

The query string is encoded here (bracket notation) instead of by httpx,
whose `params` flattening does not handle nested data.
"""

from __future__ import annotations

import json

import httpx

from servicecall.adapters.http_client import decode_body
from servicecall.adapters.query_string import append_query
from servicecall.core.domain.models import NormalizedResponse
from servicecall.core.interfaces.transport import OutboundRequest, Transport


class HttpTransport(Transport):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, request: OutboundRequest) -> NormalizedResponse:
        content: bytes | None = None
        if request.body is not None:
            content = json.dumps(request.body, ensure_ascii=False, default=str).encode("utf-8")

        response = await self._client.request(
            request.method,
            append_query(request.url, request.query),
            headers=request.headers,
            content=content,
        )

        return NormalizedResponse(
            status_code=response.status_code,
            status_message=response.reason_phrase or None,
            headers=dict(response.headers.items()),
            body=decode_body(response),
        )
