from servicecall.adapters.discovery.http import HttpDiscoveryClient
from servicecall.adapters.discovery.invoker import InvokerDiscoveryClient
from servicecall.adapters.discovery.models import DiscoveryPayload

__all__ = ["DiscoveryPayload", "HttpDiscoveryClient", "InvokerDiscoveryClient"]
