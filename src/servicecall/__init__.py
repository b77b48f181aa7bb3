"""Call other services by logical name.

`ServiceCall` resolves `(service, namespace, method)` through discovery,
sends the request and normalizes the response.
"""

from servicecall.core.config import ServiceCallSettings
from servicecall.core.domain.errors import CallError, CallErrorCode, CallErrorKind
from servicecall.core.domain.models import EndpointDescriptor, NormalizedResponse, Session
from servicecall.core.services.endpoint_resolver import EndpointCache, EndpointResolver, default_cache
from servicecall.core.services.retry import NO_RETRY_MESSAGES, should_retry
from servicecall.core.services.service_call import ServiceCall

__version__ = "0.1.0"

__all__ = [
    "CallError",
    "CallErrorCode",
    "CallErrorKind",
    "EndpointCache",
    "EndpointDescriptor",
    "EndpointResolver",
    "NO_RETRY_MESSAGES",
    "NormalizedResponse",
    "ServiceCall",
    "ServiceCallSettings",
    "Session",
    "default_cache",
    "should_retry",
]
