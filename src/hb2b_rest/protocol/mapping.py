"""Mapping of message units onto protocol headers and back-end paths.

headers_for() extracts the metadata of a message unit into a HeaderBag and
target_path() selects the back-end operation. Both enforce the preconditions
for sending: a User Message carries at most one payload and a Signal always
refers to another message unit.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from hb2b_rest.errors import FormatError, PreconditionError
from hb2b_rest.models.constants import DELIVER_PATH, NOTIFY_ERROR_PATH, NOTIFY_RECEIPT_PATH
from hb2b_rest.models.entities import Payload, TradingPartner, TypedValue
from hb2b_rest.models.message_units import (
    ErrorMessage,
    MessageUnit,
    MessageUnitBase,
    Receipt,
    SignalMessage,
    UserMessage,
)
from hb2b_rest.protocol.headers import HeaderBag, HeaderBagBuilder, HTTPHeaders

# Field value an HTTP header can carry: printable ASCII and horizontal tab
_TRANSMITTABLE_VALUE = re.compile(r"[\t\x20-\x7e]*")


def format_timestamp(timestamp: datetime | None) -> str | None:
    """Format as ISO-8601 in UTC with millisecond precision, e.g. 2019-05-01T12:00:00.000Z."""
    if timestamp is None:
        return None
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    utc = timestamp.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(text: str, header: str | None = HTTPHeaders.TIMESTAMP) -> datetime:
    """Parse an ISO-8601 date-time; a value without offset is taken as UTC.

    Raises:
        FormatError: If the text is not an ISO-8601 date-time
    """
    try:
        parsed = datetime.fromisoformat(text.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        raise FormatError(header, text, "not an ISO-8601 date-time") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def kind_name(message_unit: MessageUnitBase) -> str:
    """Human readable name of the message unit type, used in logs and errors."""
    if isinstance(message_unit, UserMessage):
        return "User Message"
    if isinstance(message_unit, Receipt):
        return "Receipt"
    if isinstance(message_unit, ErrorMessage):
        return "Error"
    raise TypeError(f"Unsupported message unit type: {type(message_unit).__name__}")


def single_payload(user_message: UserMessage) -> Payload | None:
    """Return the only payload of the User Message, None if it has none.

    Raises:
        PreconditionError: If the User Message contains more than one payload
    """
    if len(user_message.payloads) > 1:
        raise PreconditionError(
            "Too many payloads! Only one payload can be delivered",
            message_id=user_message.message_id,
            details={"payload_count": len(user_message.payloads)},
        )
    return user_message.payloads[0] if user_message.payloads else None


def check_signal(signal: SignalMessage) -> None:
    """Ensure the Signal refers to another message unit.

    Raises:
        PreconditionError: If the Signal has no refToMessageId
    """
    if not signal.ref_to_message_id:
        raise PreconditionError(
            "Missing reference to other message unit",
            message_id=signal.message_id,
        )


def target_path(message_unit: MessageUnit) -> str:
    """Path, relative to the back-end base URL, of the operation for the message unit."""
    if isinstance(message_unit, UserMessage):
        return DELIVER_PATH
    if isinstance(message_unit, Receipt):
        return NOTIFY_RECEIPT_PATH
    if isinstance(message_unit, ErrorMessage):
        return NOTIFY_ERROR_PATH
    raise TypeError(f"Unsupported message unit type: {type(message_unit).__name__}")


def _set_common(builder: HeaderBagBuilder, message_unit: MessageUnitBase) -> None:
    builder.set_header(HTTPHeaders.PMODE_ID, message_unit.pmode_id)
    builder.set_header(HTTPHeaders.MESSAGE_ID, message_unit.message_id)
    builder.set_header(HTTPHeaders.TIMESTAMP, format_timestamp(message_unit.timestamp))
    builder.set_header(HTTPHeaders.REF_TO_MESSAGE_ID, message_unit.ref_to_message_id)


def _set_typed_value(
    builder: HeaderBagBuilder, header: str, typed_value: TypedValue, message_id: str | None
) -> None:
    try:
        builder.set_typed_value(header, typed_value.value, typed_value.type)
    except ValueError as exc:
        raise PreconditionError(
            f"Value of {header} cannot be encoded: {exc}",
            message_id=message_id,
            details={"header": header},
        ) from exc


def _set_partner(
    builder: HeaderBagBuilder,
    partner: TradingPartner | None,
    id_header: str,
    role_header: str,
    message_id: str | None,
) -> None:
    if partner is None:
        return
    if partner.party_id is not None:
        _set_typed_value(builder, id_header, partner.party_id, message_id)
    builder.set_header(role_header, partner.role)


def _user_message_headers(user_message: UserMessage) -> HeaderBag:
    payload = single_payload(user_message)

    builder = HeaderBagBuilder()
    _set_common(builder, user_message)
    message_id = user_message.message_id
    _set_partner(
        builder,
        user_message.sender,
        HTTPHeaders.SENDER_PARTY_ID,
        HTTPHeaders.SENDER_ROLE,
        message_id,
    )
    _set_partner(
        builder,
        user_message.receiver,
        HTTPHeaders.RECEIVER_PARTY_ID,
        HTTPHeaders.RECEIVER_ROLE,
        message_id,
    )
    builder.set_properties(HTTPHeaders.MESSAGE_PROPS, user_message.message_properties)

    ci = user_message.collaboration_info
    if ci is not None:
        builder.set_header(HTTPHeaders.CONVERSATION_ID, ci.conversation_id)
        if ci.service is not None:
            _set_typed_value(builder, HTTPHeaders.SERVICE, ci.service, message_id)
        builder.set_header(HTTPHeaders.ACTION, ci.action)

    if payload is not None:
        builder.set_header(HTTPHeaders.MIME_TYPE, payload.mime_type)
        builder.set_properties(HTTPHeaders.PART_PROPS, payload.properties)
        schema = payload.schema_reference
        if schema is not None:
            builder.set_header(HTTPHeaders.SCHEMA_LOCATION, schema.location)
            builder.set_header(HTTPHeaders.SCHEMA_VERSION, schema.version)
            builder.set_header(HTTPHeaders.SCHEMA_NS, schema.namespace)

    return builder.build()


def _signal_headers(signal: SignalMessage) -> HeaderBag:
    check_signal(signal)

    builder = HeaderBagBuilder()
    _set_common(builder, signal)
    if isinstance(signal, ErrorMessage):
        builder.set_errors(HTTPHeaders.ERROR_MESSAGE, signal.errors)
    return builder.build()


def check_transmittable(headers: HeaderBag, message_id: str | None = None) -> None:
    """Ensure every header value can be sent as an HTTP header field.

    Header values are sent as ASCII. Non-ASCII text and control characters,
    line breaks included, cannot be carried and make the message unit
    unsendable as is.

    Raises:
        PreconditionError: Naming the first header whose value cannot be sent
    """
    for name, value in headers.items():
        if not _TRANSMITTABLE_VALUE.fullmatch(value):
            raise PreconditionError(
                f"Value of {name} header contains characters that cannot be sent"
                " (only printable ASCII is allowed)",
                message_id=message_id,
                details={"header": name},
            )


def headers_for(message_unit: MessageUnit) -> HeaderBag:
    """Build the protocol headers for delivering or notifying the message unit.

    Args:
        message_unit: The User Message, Receipt or Error to send

    Returns:
        The complete, immutable set of protocol headers

    Raises:
        PreconditionError: If the User Message has more than one payload, the
            Signal has no refToMessageId or a metadata value cannot be carried
            in an HTTP header
    """
    if isinstance(message_unit, UserMessage):
        headers = _user_message_headers(message_unit)
    elif isinstance(message_unit, (Receipt, ErrorMessage)):
        headers = _signal_headers(message_unit)
    else:
        raise TypeError(f"Unsupported message unit type: {type(message_unit).__name__}")
    check_transmittable(headers, message_unit.message_id)
    return headers
