"""Reading a submitted User Message from the protocol headers.

This is the receiving side of the header mapping: a back-end submits a
single payload with its metadata in the HTTP headers, and the headers are
turned into a UserMessage record that can be handed to the messaging core.
Storing the submitted bytes is up to the caller, which passes the location
of the stored content.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from hb2b_rest.errors import FormatError
from hb2b_rest.models.entities import (
    CollaborationInfo,
    PartyId,
    Payload,
    SchemaReference,
    Service,
    TradingPartner,
)
from hb2b_rest.models.enums import Containment
from hb2b_rest.models.message_units import UserMessage
from hb2b_rest.observability import get_logger, get_metrics
from hb2b_rest.protocol.headers import HeaderBag, HTTPHeaders
from hb2b_rest.protocol.mapping import parse_timestamp

logger = get_logger(__name__)


def _partner(headers: HeaderBag, id_header: str, role_header: str) -> TradingPartner | None:
    party_id = headers.get_typed_value(id_header)
    role = headers.get_header(role_header)
    if party_id is None and not role:
        return None
    return TradingPartner(
        party_id=PartyId(value=party_id.value, type=party_id.type) if party_id else None,
        role=role or None,
    )


def _collaboration_info(headers: HeaderBag) -> CollaborationInfo | None:
    conversation_id = headers.get_header(HTTPHeaders.CONVERSATION_ID)
    service = headers.get_typed_value(HTTPHeaders.SERVICE)
    action = headers.get_header(HTTPHeaders.ACTION)
    if not conversation_id and service is None and not action:
        return None
    return CollaborationInfo(
        conversation_id=conversation_id or None,
        service=Service(value=service.value, type=service.type) if service else None,
        action=action or None,
    )


def _containment(headers: HeaderBag) -> Containment:
    value = headers.get_header(HTTPHeaders.CONTAINMENT)
    if not value:
        return Containment.ATTACHMENT
    try:
        containment = Containment[value.upper()]
    except KeyError as exc:
        raise FormatError(
            HTTPHeaders.CONTAINMENT, value, f"unknown containment value: {value}"
        ) from exc
    if containment is Containment.EXTERNAL:
        raise FormatError(
            HTTPHeaders.CONTAINMENT, value, "external payload reference not supported"
        )
    return containment


def _schema_reference(headers: HeaderBag) -> SchemaReference | None:
    namespace = headers.get_header(HTTPHeaders.SCHEMA_NS)
    version = headers.get_header(HTTPHeaders.SCHEMA_VERSION)
    location = headers.get_header(HTTPHeaders.SCHEMA_LOCATION)
    if not (namespace or version or location):
        return None
    if not location:
        raise FormatError(
            HTTPHeaders.SCHEMA_LOCATION,
            location,
            "missing required location of the payload's schema",
        )
    return SchemaReference(namespace=namespace or None, version=version or None, location=location)


def parse_payload(headers: HeaderBag, content_location: Path | None = None) -> Payload:
    """Create the payload record from the payload related headers.

    Raises:
        FormatError: If a payload header is missing or incorrectly formatted
    """
    return Payload(
        mime_type=headers.get_header(HTTPHeaders.MIME_TYPE) or None,
        containment=_containment(headers),
        properties=headers.get_properties(HTTPHeaders.PART_PROPS),
        schema_reference=_schema_reference(headers),
        content_location=content_location,
    )


def parse_submission(
    headers: HeaderBag | Mapping[str, str], content_location: Path | None = None
) -> UserMessage:
    """Create the User Message for a submission from its HTTP headers.

    The P-Mode identifier is the only required header; all other metadata
    may also be provided by the P-Mode.

    Args:
        headers: The received HTTP headers
        content_location: Where the caller stored the submitted payload bytes

    Returns:
        UserMessage with exactly one payload

    Raises:
        FormatError: If a required header is missing or a header is incorrectly formatted
    """
    if not isinstance(headers, HeaderBag):
        headers = HeaderBag(headers)

    try:
        user_message = _build_submission(headers, content_location)
    except FormatError as exc:
        get_metrics().increment_counter("hb2b_submissions_total", {"status": "rejected"})
        logger.warning("hb2b.submission.rejected", header=exc.header, error=exc.message)
        raise

    get_metrics().increment_counter("hb2b_submissions_total", {"status": "accepted"})
    logger.debug(
        "hb2b.submission.parsed",
        pmode_id=user_message.pmode_id,
        message_id=user_message.message_id,
    )
    return user_message


def _build_submission(headers: HeaderBag, content_location: Path | None) -> UserMessage:
    pmode_id = headers.get_header(HTTPHeaders.PMODE_ID)
    if not pmode_id:
        raise FormatError(HTTPHeaders.PMODE_ID, pmode_id, "missing required PMode.id")

    timestamp_text = headers.get_header(HTTPHeaders.TIMESTAMP)
    return UserMessage(
        pmode_id=pmode_id,
        message_id=headers.get_header(HTTPHeaders.MESSAGE_ID) or None,
        timestamp=parse_timestamp(timestamp_text) if timestamp_text else None,
        ref_to_message_id=headers.get_header(HTTPHeaders.REF_TO_MESSAGE_ID) or None,
        sender=_partner(headers, HTTPHeaders.SENDER_PARTY_ID, HTTPHeaders.SENDER_ROLE),
        receiver=_partner(headers, HTTPHeaders.RECEIVER_PARTY_ID, HTTPHeaders.RECEIVER_ROLE),
        message_properties=headers.get_properties(HTTPHeaders.MESSAGE_PROPS),
        collaboration_info=_collaboration_info(headers),
        payloads=[parse_payload(headers, content_location)],
    )
