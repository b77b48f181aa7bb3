from servicecall.adapters.transports.http import HttpTransport
from servicecall.adapters.transports.invoker import InvokerTransport

__all__ = ["HttpTransport", "InvokerTransport"]
