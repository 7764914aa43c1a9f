from .client import CustomerIOClient, CustomerIOConfigError, CustomerIOError

__all__ = ["CustomerIOClient", "CustomerIOConfigError", "CustomerIOError"]
