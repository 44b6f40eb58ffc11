"""HTTP headers carrying the message-unit metadata.

HeaderBag is the read-only, case-insensitive set of protocol headers of one
exchange. It is produced by HeaderBagBuilder when sending, or created from
the received name/value mapping when receiving. Header names are stored in
lower case because HTTP header names are case-insensitive.

Multiple occurrences of a header (comma joined list values as allowed by
RFC 7230) are not supported; a name has at most one value.

Example:
    >>> headers = (
    ...     HeaderBagBuilder()
    ...     .set_header(HTTPHeaders.MESSAGE_ID, "msg-1")
    ...     .set_typed_value(HTTPHeaders.SERVICE, "Test", "urn:example:services")
    ...     .build()
    ... )
    >>> headers.get_header("x-holodeckb2b-messageid")
    'msg-1'
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from hb2b_rest.models.entities import EbmsError, Property, TypedValue
from hb2b_rest.protocol.properties import decode_properties, encode_properties
from hb2b_rest.protocol.typed_value import decode_typed_value, encode_typed_value


class HTTPHeaders:
    """Names of the HTTP headers used by the REST integration."""

    # Used in all operations
    PMODE_ID = "X-HolodeckB2B-PModeId"
    MESSAGE_ID = "X-HolodeckB2B-MessageId"
    TIMESTAMP = "X-HolodeckB2B-Timestamp"
    REF_TO_MESSAGE_ID = "X-HolodeckB2B-RefToMessageId"

    # User Message only
    SENDER_PARTY_ID = "X-HolodeckB2B-SenderId"
    SENDER_ROLE = "X-HolodeckB2B-SenderRole"
    RECEIVER_PARTY_ID = "X-HolodeckB2B-ReceiverId"
    RECEIVER_ROLE = "X-HolodeckB2B-ReceiverRole"
    MESSAGE_PROPS = "X-HolodeckB2B-MessageProperties"
    CONVERSATION_ID = "X-HolodeckB2B-ConversationId"
    SERVICE = "X-HolodeckB2B-Service"
    ACTION = "X-HolodeckB2B-Action"

    # Payload of a User Message
    MIME_TYPE = "Content-Type"
    CONTAINMENT = "X-HolodeckB2B-Containment"
    PART_PROPS = "X-HolodeckB2B-PayloadProperties"
    SCHEMA_NS = "X-HolodeckB2B-SchemaNamespace"
    SCHEMA_VERSION = "X-HolodeckB2B-SchemaVersion"
    SCHEMA_LOCATION = "X-HolodeckB2B-SchemaLocation"

    # Error Signal notification only
    ERROR_MESSAGE = "X-HolodeckB2B-Errors"


def encode_errors(errors: Iterable[EbmsError]) -> str:
    """Format ebMS errors as a comma separated ``[severity]code-detail`` list."""
    entries = []
    for e in errors:
        entry = f"[{e.severity.value}]{e.error_code}"
        if e.error_detail:
            entry = f"{entry}-{e.error_detail}"
        entries.append(entry)
    return ",".join(entries)


class HeaderBag(Mapping[str, str]):
    """Read-only, case-insensitive set of protocol headers.

    Iterating yields the lower-cased header names. The typed accessors decode
    the header value with the matching codec; an absent header is never an
    error.
    """

    __slots__ = ("_headers",)

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self._headers: dict[str, str] = {}
        if headers:
            for name, value in headers.items():
                self._headers[name.lower()] = value

    def __getitem__(self, name: str) -> str:
        return self._headers[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"HeaderBag({self._headers!r})"

    def get_header(self, name: str) -> str | None:
        """Return the value of the header, None if it does not exist."""
        return self._headers.get(name.lower())

    def get_typed_value(self, name: str) -> TypedValue | None:
        """Decode the ``[type]value`` header, None if absent or empty.

        Raises:
            FormatError: If the header value is not a correctly formatted typed value
        """
        value = self.get_header(name)
        if not value:
            return None
        return decode_typed_value(value, header=name)

    def get_properties(self, name: str) -> list[Property]:
        """Decode the property list header, an empty list if absent.

        Raises:
            FormatError: If the header value is not a correctly formatted property list
        """
        value = self.get_header(name)
        if not value:
            return []
        return decode_properties(value, header=name)

    def to_dict(self) -> dict[str, str]:
        """Return a copy of the headers as a plain dict."""
        return dict(self._headers)


class HeaderBagBuilder:
    """Accumulates protocol headers and produces an immutable HeaderBag.

    Setting a header to an empty or None value is a no-op, which is the only
    way to omit a header. Setting a header again overwrites the earlier value.
    All setters return the builder so calls can be chained.
    """

    def __init__(self) -> None:
        self._headers: dict[str, str] = {}

    def set_header(self, name: str, value: str | None) -> HeaderBagBuilder:
        if value:
            self._headers[name.lower()] = value
        return self

    def set_typed_value(
        self, name: str, value: str | None, type_: str | None = None
    ) -> HeaderBagBuilder:
        """Set the header to ``[type]value``; skipped when value is empty."""
        if value:
            self.set_header(name, encode_typed_value(value, type_))
        return self

    def set_properties(
        self, name: str, properties: Iterable[Property] | None
    ) -> HeaderBagBuilder:
        """Set the header to the encoded property list; skipped when there are none."""
        if properties:
            self.set_header(name, encode_properties(properties))
        return self

    def set_errors(self, name: str, errors: Iterable[EbmsError] | None) -> HeaderBagBuilder:
        """Set the header to the encoded ebMS error list; skipped when there are none."""
        if errors:
            self.set_header(name, encode_errors(errors))
        return self

    def build(self) -> HeaderBag:
        return HeaderBag(self._headers)


__all__ = [
    "HTTPHeaders",
    "HeaderBag",
    "HeaderBagBuilder",
    "encode_errors",
]
