"""Shared pytest fixtures for the REST back-end integration tests.

This module provides the message units used across test modules and makes
sure the process wide metrics collector starts empty for every test.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from hb2b_rest.models.entities import (
    CollaborationInfo,
    EbmsError,
    PartyId,
    Payload,
    Property,
    SchemaReference,
    Service,
    TradingPartner,
)
from hb2b_rest.models.enums import Severity
from hb2b_rest.models.message_units import ErrorMessage, Receipt, UserMessage
from hb2b_rest.observability.metrics import reset_metrics

# Load hb2b_rest.testing fixtures (mock_backend, delivery_client)
pytest_plugins = ["hb2b_rest.testing.fixtures"]

TEST_TIMESTAMP = datetime(2019, 5, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)
TEST_PAYLOAD_CONTENT = b"<Invoice xmlns='urn:example:invoice'><Amount>42</Amount></Invoice>"


@pytest.fixture(autouse=True)
def _isolate_metrics() -> None:
    """Start every test with an empty metrics collector."""
    reset_metrics()


@pytest.fixture
def payload_file(tmp_path: Path) -> Path:
    """File holding the content of the test payload."""
    path = tmp_path / "payload.xml"
    path.write_bytes(TEST_PAYLOAD_CONTENT)
    return path


@pytest.fixture
def user_message(payload_file: Path) -> UserMessage:
    """Fully populated User Message with one payload."""
    return UserMessage(
        pmode_id="pm-invoice",
        message_id="msg-0001@hb2b.test",
        timestamp=TEST_TIMESTAMP,
        ref_to_message_id="msg-0000@hb2b.test",
        sender=TradingPartner(
            party_id=PartyId(value="Sender", type="urn:example:partyids"),
            role="Seller",
        ),
        receiver=TradingPartner(
            party_id=PartyId(value="urn:example:Receiver"),
            role="Buyer",
        ),
        collaboration_info=CollaborationInfo(
            conversation_id="conv-1",
            service=Service(value="Invoicing", type="urn:example:services"),
            action="Submit",
        ),
        message_properties=[
            Property(name="originalSender", value="urn:example:C1"),
            Property(name="finalRecipient", value="urn:example:C4", type="iso6523"),
        ],
        payloads=[
            Payload(
                mime_type="application/xml",
                properties=[Property(name="part", value="invoice")],
                schema_reference=SchemaReference(
                    namespace="urn:example:invoice",
                    version="2.1",
                    location="http://schemas.example.com/invoice.xsd",
                ),
                content_location=payload_file,
            )
        ],
    )


@pytest.fixture
def receipt() -> Receipt:
    """Receipt referring to the test User Message."""
    return Receipt(
        pmode_id="pm-invoice",
        message_id="rcpt-0001@hb2b.test",
        timestamp=TEST_TIMESTAMP,
        ref_to_message_id="msg-0001@hb2b.test",
    )


@pytest.fixture
def error_message() -> ErrorMessage:
    """Error Signal with a failure and a warning."""
    return ErrorMessage(
        pmode_id="pm-invoice",
        message_id="err-0001@hb2b.test",
        timestamp=TEST_TIMESTAMP,
        ref_to_message_id="msg-0001@hb2b.test",
        errors=[
            EbmsError(severity=Severity.FAILURE, error_code="EBMS:0004", error_detail="Bad"),
            EbmsError(severity=Severity.WARNING, error_code="EBMS:0006"),
        ],
    )
