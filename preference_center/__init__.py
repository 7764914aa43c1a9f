"""Email preference center backed by Customer.io."""

__version__ = "0.1.0"
