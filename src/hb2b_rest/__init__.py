"""Holodeck B2B REST back-end integration.

Carries ebMS message-unit metadata over flat HTTP headers and delivers or
notifies message units to a back-end REST service.

Example:
    >>> from hb2b_rest import DeliveryClient
    >>> client = DeliveryClient("http://backend.example.com/hb2b")
    >>> client.deliver(user_message)
"""

__version__ = "1.0.0"

from hb2b_rest.errors import (
    ConfigurationError,
    DeliveryError,
    FormatError,
    HB2BRestError,
    PreconditionError,
    TransportError,
)
from hb2b_rest.protocol.headers import HeaderBag, HeaderBagBuilder, HTTPHeaders
from hb2b_rest.transport.client import DeliveryClient

__all__ = [
    "__version__",
    "ConfigurationError",
    "DeliveryClient",
    "DeliveryError",
    "FormatError",
    "HB2BRestError",
    "HTTPHeaders",
    "HeaderBag",
    "HeaderBagBuilder",
    "PreconditionError",
    "TransportError",
]
