"""Codec for property lists.

A property list is written as comma separated ``name=[type]value`` entries,
where the bracketed type is optional. Whitespace is allowed around ``=`` and
around the separating commas.

There is no escape mechanism, so a value containing a comma cannot be
represented; the back-end relies on exactly this grammar.

Example:
    >>> decode_properties("p1=v1, p2=[t2]v2")
    [Property(name='p1', value='v1', type=None), Property(name='p2', value='v2', type='t2')]
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from hb2b_rest.errors import FormatError
from hb2b_rest.models.entities import Property

# One entry plus the (optional) rest of the list. Groups:
#   1 - name
#   3 - type (optional, may be empty), ends at the first ']'
#   4 - value, which cannot start with '[' unless consumed as the type
#   6 - remainder after the separating ',' (optional)
_ENTRY_PATTERN = re.compile(
    r"\s*([^=\s]*)\s*=\s*(\[([^\s,\]]*)\])?([^\[ ,][^\s,]*)\s*(,(.*))?"
)


def encode_properties(properties: Iterable[Property]) -> str:
    """Format properties as a comma separated ``name=[type]value`` list.

    An empty collection results in an empty string; callers should then
    not set the header at all.
    """
    entries = []
    for p in properties:
        if p.type:
            entries.append(f"{p.name}=[{p.type}]{p.value}")
        else:
            entries.append(f"{p.name}={p.value}")
    return ",".join(entries)


def decode_properties(text: str, header: str | None = None) -> list[Property]:
    """Parse a comma separated list of properties.

    Entries are consumed left to right. If any entry is malformed, including
    a trailing separator that is not followed by another entry, the whole
    list is rejected.

    Args:
        text: The encoded property list
        header: Name of the header the text was read from, used in errors

    Returns:
        The properties in the order they appear in the text

    Raises:
        FormatError: If the text is not a correctly formatted property list
    """
    properties: list[Property] = []
    if not text:
        return properties

    remainder: str | None = text
    while remainder is not None:
        match = _ENTRY_PATTERN.fullmatch(remainder)
        if match is None:
            raise FormatError(header, text)
        name, type_, value = match.group(1), match.group(3), match.group(4)
        if not name or not value:
            raise FormatError(header, text)
        properties.append(Property(name=name, value=value, type=type_ or None))
        remainder = match.group(6)

    return properties
