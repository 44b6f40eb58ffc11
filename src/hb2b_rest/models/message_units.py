"""Message-unit records exchanged with the back-end.

A message unit is one of a closed set of variants: a User Message, a
Receipt Signal or an Error Signal. The ``kind`` field discriminates the
variants so records can be validated from JSON into the right type.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Literal, Union

from pydantic import Discriminator, Field, TypeAdapter, field_validator

from hb2b_rest.models.base import HB2BBaseModel
from hb2b_rest.models.entities import (
    CollaborationInfo,
    EbmsError,
    Payload,
    Property,
    TradingPartner,
)


class MessageUnitBase(HB2BBaseModel):
    """Fields shared by all message units.

    Attributes:
        message_id: The ebMS MessageId
        timestamp: Time the message unit was created; naive values are taken as UTC
        ref_to_message_id: MessageId of the message unit this one refers to
        pmode_id: Identifier of the P-Mode that governs the processing
    """

    message_id: str | None = None
    timestamp: datetime | None = None
    ref_to_message_id: str | None = None
    pmode_id: str | None = None

    @field_validator("timestamp")
    @classmethod
    def _ensure_aware(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class UserMessage(MessageUnitBase):
    """A business message, carrying at most one payload when delivered.

    Example:
        >>> msg = UserMessage(
        ...     message_id="msg-1@example.com",
        ...     sender=TradingPartner(party_id=PartyId(value="sender")),
        ...     receiver=TradingPartner(party_id=PartyId(value="receiver")),
        ... )
    """

    kind: Literal["user_message"] = "user_message"
    sender: TradingPartner | None = None
    receiver: TradingPartner | None = None
    collaboration_info: CollaborationInfo | None = None
    message_properties: list[Property] = Field(default_factory=list)
    payloads: list[Payload] = Field(default_factory=list)


class Receipt(MessageUnitBase):
    """Receipt Signal acknowledging a previously sent User Message."""

    kind: Literal["receipt"] = "receipt"


class ErrorMessage(MessageUnitBase):
    """Error Signal reporting problems with a previously exchanged message unit."""

    kind: Literal["error"] = "error"
    errors: list[EbmsError] = Field(default_factory=list)


SignalMessage = Union[Receipt, ErrorMessage]

MessageUnit = Annotated[Union[UserMessage, Receipt, ErrorMessage], Discriminator("kind")]

MessageUnitAdapter: TypeAdapter[MessageUnit] = TypeAdapter(MessageUnit)
"""TypeAdapter for the MessageUnit discriminated union.

Example:
    >>> unit = MessageUnitAdapter.validate_python(
    ...     {"kind": "receipt", "message_id": "r-1", "ref_to_message_id": "m-1"}
    ... )
    >>> type(unit).__name__
    'Receipt'
"""
