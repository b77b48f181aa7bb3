"""Endpoint resolution with a process-lifetime cache.

The resolver translates `(service, namespace, method)` into an
`EndpointDescriptor` through a `DiscoveryClient` and keeps every successful
resolution for the lifetime of its `EndpointCache`.

Concurrent first-time lookups of the same key share a single in-flight task.
A failed lookup is never cached: the in-flight slot is dropped and the next
call asks discovery again.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from servicecall.core.domain.models import EndpointDescriptor, build_cache_key
from servicecall.core.interfaces.discovery import DiscoveryClient


class EndpointCache:
    """Map of resolved endpoints keyed by `service.namespace.method`."""

    def __init__(self) -> None:
        self._entries: dict[str, EndpointDescriptor] = {}

    def get(self, key: str) -> EndpointDescriptor | None:
        return self._entries.get(key)

    def set(self, key: str, descriptor: EndpointDescriptor) -> None:
        self._entries[key] = descriptor

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


# Shared by every resolver built without an explicit cache.
default_cache = EndpointCache()


class EndpointResolver:
    """Cached front of a `DiscoveryClient`."""

    def __init__(self, discovery: DiscoveryClient, cache: EndpointCache | None = None) -> None:
        self._discovery = discovery
        self._cache = cache if cache is not None else default_cache
        self._in_flight: dict[str, asyncio.Task[EndpointDescriptor]] = {}

    @property
    def cache(self) -> EndpointCache:
        return self._cache

    async def resolve(self, service: str, namespace: str, method: str) -> EndpointDescriptor:
        key = build_cache_key(service, namespace, method)

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Endpoint cache hit for {}", key)
            return cached

        task = self._in_flight.get(key)
        if task is None:
            logger.debug("Endpoint cache miss for {}", key)
            task = asyncio.ensure_future(self._fetch_and_store(key, service, namespace, method))
            self._in_flight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))

        # shield: one cancelled waiter must not cancel the lookup for the others
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task[EndpointDescriptor]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Every waiter may be gone; mark the failure as retrieved.
        if not task.cancelled():
            task.exception()

    async def _fetch_and_store(self, key: str, service: str, namespace: str, method: str) -> EndpointDescriptor:
        descriptor = await self._discovery.fetch(service, namespace, method)
        self._cache.set(key, descriptor)
        logger.debug("Resolved {} -> {} {}", key, descriptor.http_method, descriptor.endpoint)
        return descriptor
