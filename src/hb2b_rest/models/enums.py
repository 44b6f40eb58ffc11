"""Enumerations for message-unit records."""

from enum import Enum


class Severity(str, Enum):
    """Severity of an ebMS error.

    Example:
        >>> Severity.FAILURE.value
        'failure'
    """

    FAILURE = "failure"
    WARNING = "warning"


class Containment(str, Enum):
    """How a payload is (to be) contained in the ebMS message.

    Only ATTACHMENT and BODY can be carried by the REST integration; an
    EXTERNAL payload has no bytes that could be transferred.
    """

    ATTACHMENT = "ATTACHMENT"
    BODY = "BODY"
    EXTERNAL = "EXTERNAL"
