"""Aggregation of paginated `list` endpoints.

Termination uses the short-page rule: keep asking while the last page came
back full (`len(page) == page_size`). A short or empty page is the last one.
When the real total is an exact multiple of the page size this costs one
extra request that returns an empty page.

Pages are fetched strictly one after another.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from loguru import logger

from servicecall.core.domain.models import NormalizedResponse, PaginationState

LIST_METHOD = "list"

HEADER_PAGE = "x-page"
HEADER_PAGE_SIZE = "x-page-size"
HEADER_TOTALS = "x-totals"

PageFetcher = Callable[..., Awaitable[NormalizedResponse]]


def page_headers(state: PaginationState) -> dict[str, str]:
    return {
        HEADER_PAGE: str(state.page),
        HEADER_PAGE_SIZE: str(state.page_size),
        # the backend can skip counting totals; termination does not need them
        HEADER_TOTALS: "false",
    }


class PaginationAggregator:
    """Loops a call function over pages and concatenates the bodies.

    `fetch` has the façade signature
    `(service, namespace, method, request_data, request_headers, path_parameters)`.
    """

    def __init__(self, fetch: PageFetcher, *, safe_mode: bool = False) -> None:
        self._fetch = fetch
        self._safe_mode = safe_mode

    async def collect(
        self,
        service: str,
        namespace: str,
        request_data: Any = None,
        path_parameters: Mapping[str, Any] | None = None,
        *,
        page_size: int,
    ) -> NormalizedResponse:
        state = PaginationState(page_size=page_size)

        while True:
            response = await self._fetch(
                service,
                namespace,
                LIST_METHOD,
                request_data,
                page_headers(state),
                path_parameters,
            )

            if self._safe_mode and response.status_code >= 400:
                logger.debug(
                    "List {}.{} stopped at page {} with status {}",
                    service,
                    namespace,
                    state.page,
                    response.status_code,
                )
                return response

            state.last_response = response
            page_items = response.body if isinstance(response.body, list) else []
            state.items.extend(page_items)

            if len(page_items) != state.page_size:
                break
            state.page += 1

        logger.debug("List {}.{} collected {} items in {} pages", service, namespace, len(state.items), state.page)
        return state.last_response.model_copy(update={"body": state.items})
