"""Structural contracts (Protocols) between the core and its adapters."""

from servicecall.core.interfaces.discovery import DiscoveryClient
from servicecall.core.interfaces.invoker import FunctionInvoker
from servicecall.core.interfaces.secrets import SecretStore
from servicecall.core.interfaces.transport import OutboundRequest, Transport

__all__ = [
    "DiscoveryClient",
    "FunctionInvoker",
    "OutboundRequest",
    "SecretStore",
    "Transport",
]
