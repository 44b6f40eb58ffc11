"""Metadata micro-protocol: typed values, property lists and protocol headers.

Example:
    >>> from hb2b_rest.protocol import HeaderBag, HTTPHeaders
    >>> headers = HeaderBag({"X-HolodeckB2B-MessageProperties": "p1=v1, p2=[t2]v2"})
    >>> [p.name for p in headers.get_properties(HTTPHeaders.MESSAGE_PROPS)]
    ['p1', 'p2']
"""

from hb2b_rest.protocol.headers import HeaderBag, HeaderBagBuilder, HTTPHeaders, encode_errors
from hb2b_rest.protocol.mapping import format_timestamp, headers_for, parse_timestamp, target_path
from hb2b_rest.protocol.properties import decode_properties, encode_properties
from hb2b_rest.protocol.submission import parse_payload, parse_submission
from hb2b_rest.protocol.typed_value import decode_typed_value, encode_typed_value

__all__ = [
    "HTTPHeaders",
    "HeaderBag",
    "HeaderBagBuilder",
    "decode_properties",
    "decode_typed_value",
    "encode_errors",
    "encode_properties",
    "encode_typed_value",
    "format_timestamp",
    "headers_for",
    "parse_payload",
    "parse_submission",
    "parse_timestamp",
    "target_path",
]
