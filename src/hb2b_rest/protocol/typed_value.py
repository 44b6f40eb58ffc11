"""Codec for typed values.

A typed value is a scalar optionally qualified by a type and is written as
``[type]value``, or just ``value`` when there is no type. It is used for
the PartyIds of the trading partners and for the Service.

Example:
    >>> encode_typed_value("senderId", "urn:example:partyids")
    '[urn:example:partyids]senderId'
    >>> decode_typed_value("[]senderId")
    TypedValue(value='senderId', type=None)
"""

from __future__ import annotations

from hb2b_rest.errors import FormatError
from hb2b_rest.models.entities import TypedValue


def encode_typed_value(value: str, type_: str | None = None) -> str:
    """Format a value and its optional type as ``[type]value``.

    An untyped value that itself starts with ``[`` is written with empty
    brackets, ``[][a]b``, so it is not read back as a type.

    Args:
        value: The value, must not be empty
        type_: Optional type, omitted from the result when empty

    Returns:
        The encoded typed value

    Raises:
        ValueError: If value is empty, callers skip the header instead, or the
            type contains ``]``
    """
    if not value:
        raise ValueError("A typed value requires a non-empty value")
    if type_:
        if "]" in type_:
            raise ValueError(f"Type of a typed value cannot contain ']': {type_!r}")
        return f"[{type_}]{value}"
    if value.startswith("["):
        return f"[]{value}"
    return value


def decode_typed_value(text: str, header: str | None = None) -> TypedValue:
    """Parse a ``[type]value`` string.

    The type ends at the first ``]``. Empty brackets mean the value has no
    type. Text that does not start with ``[`` is an untyped value.

    Args:
        text: The encoded typed value
        header: Name of the header the text was read from, used in errors

    Returns:
        The decoded TypedValue

    Raises:
        FormatError: If the type bracket is not closed or no value follows it
    """
    if not text:
        raise FormatError(header, text, "empty value")
    if not text.startswith("["):
        return TypedValue(value=text)

    end = text.find("]")
    if end < 0:
        raise FormatError(header, text, "type is not terminated by ']'")
    if end >= len(text) - 1:
        raise FormatError(header, text, "no value after type")
    return TypedValue(value=text[end + 1 :], type=text[1:end] or None)
