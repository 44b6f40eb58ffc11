"""Transport layer delivering message units to the back-end over HTTP.

Example:
    >>> from hb2b_rest.transport import DeliveryClient
    >>> client = DeliveryClient("http://backend.example.com/hb2b")
    >>> client.deliver(receipt)
"""

from hb2b_rest.transport.client import DeliveryClient

__all__ = ["DeliveryClient"]
