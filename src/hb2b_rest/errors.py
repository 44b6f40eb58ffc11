"""Error taxonomy for the Holodeck B2B REST back-end integration.

All errors raised by this package derive from HB2BRestError, which carries
a machine readable code (``hb2b:<area>/<reason>``), a human readable message
and optional context details.

Delivery failures additionally indicate whether they are *permanent*. A
permanent failure (for example a User Message with more than one payload)
will fail again on every attempt, so a calling component must not retry it.
"""

from __future__ import annotations

from typing import Any


class HB2BRestError(Exception):
    """Base exception for all errors of the REST back-end integration.

    Attributes:
        code: Error code following the hb2b:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(HB2BRestError):
    """Raised when the delivery client is configured with invalid settings.

    Attributes:
        setting: Name of the offending setting
        value: The rejected value
    """

    def __init__(
        self,
        setting: str,
        value: Any,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="hb2b:config/invalid",
            message=f"Invalid {setting} specified: {reason}",
            details={"setting": setting, "value": str(value), **(details or {})},
        )
        self.setting = setting
        self.value = value
        self.reason = reason


class FormatError(HB2BRestError):
    """Raised when a header value does not follow the metadata grammar.

    Decoding is all-or-nothing: when this error is raised no part of the
    offending header value has been applied.

    Attributes:
        header: Name of the malformed header, None when decoding a bare value
        value: The malformed header value
    """

    def __init__(
        self,
        header: str | None,
        value: str | None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        subject = header if header else "Header value"
        message = f"{subject} not in correct format"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            code="hb2b:protocol/malformed_header",
            message=message,
            details={"header": header, "value": value, **(details or {})},
        )
        self.header = header
        self.value = value
        self.reason = reason


class DeliveryError(HB2BRestError):
    """Base class for failures to deliver or notify a message unit.

    Attributes:
        message_id: MessageId of the message unit that could not be delivered
        permanent: True when retrying the same message unit cannot succeed
    """

    def __init__(
        self,
        code: str,
        message: str,
        message_id: str | None = None,
        permanent: bool = False,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            details={"message_id": message_id, "permanent": permanent, **(details or {})},
        )
        self.message_id = message_id
        self.permanent = permanent


class PreconditionError(DeliveryError):
    """Raised when a message unit cannot be sent at all.

    Signalled before any network activity, for example for a User Message
    with more than one payload or a Signal without a refToMessageId.
    """

    def __init__(
        self,
        reason: str,
        message_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="hb2b:delivery/precondition",
            message=reason,
            message_id=message_id,
            permanent=True,
            details=details,
        )
        self.reason = reason


class TransportError(DeliveryError):
    """Raised when the back-end did not accept the delivery or notification.

    Covers both a non-2xx response and the absence of a response (connection
    refused, I/O error, timeout).

    Attributes:
        url: Target URL of the request
        status_code: HTTP status code, None when no response was received
        reason: HTTP reason phrase or description of the I/O failure
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        url: str,
        status_code: int | None = None,
        reason: str | None = None,
        cause: BaseException | None = None,
        message_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="hb2b:delivery/transport",
            message=message,
            message_id=message_id,
            permanent=False,
            details={
                "url": url,
                "status_code": status_code,
                "reason": reason,
                **(details or {}),
            },
        )
        self.url = url
        self.status_code = status_code
        self.reason = reason
        self.cause = cause
