"""Domain models and errors.

Pure data structures: the domain knows nothing about httpx, typer or any SDK.
"""

from servicecall.core.domain.errors import CallError, CallErrorCode, CallErrorKind
from servicecall.core.domain.models import (
    EndpointDescriptor,
    NormalizedResponse,
    PaginationState,
    Session,
    build_cache_key,
)

__all__ = [
    "CallError",
    "CallErrorCode",
    "CallErrorKind",
    "EndpointDescriptor",
    "NormalizedResponse",
    "PaginationState",
    "Session",
    "build_cache_key",
]
