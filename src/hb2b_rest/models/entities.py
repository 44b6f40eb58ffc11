"""Building blocks of the message-unit records.

This module defines the metadata elements carried in the protocol headers:
- TypedValue: A scalar optionally qualified by a type (PartyId, Service)
- Property: A named, optionally typed scalar of a property list
- EbmsError: Description of an ebMS error reported in an Error Signal
- TradingPartner: Sender or Receiver of a User Message
- CollaborationInfo: Business context of a User Message
- SchemaReference: Schema describing the content of a payload
- Payload: Metadata of the single payload of a User Message
"""

from pathlib import Path
from typing import Annotated

from pydantic import BeforeValidator, Field

from hb2b_rest.models.base import HB2BBaseModel
from hb2b_rest.models.enums import Containment, Severity


def _empty_to_none(v: str | None) -> str | None:
    """Treat an empty type as "no type"."""
    return v if v else None


OptionalType = Annotated[str | None, BeforeValidator(_empty_to_none)]


class TypedValue(HB2BBaseModel):
    """A value optionally qualified by a type, written as ``[type]value``.

    Attributes:
        value: The actual value, never empty
        type: The type of the value, None when untyped

    Example:
        >>> TypedValue(value="senderId", type="urn:org:holodeckb2b:test:partyids")
        >>> TypedValue(value="senderId", type="").type is None
        True
    """

    value: str = Field(..., min_length=1, description="The value")
    type: OptionalType = Field(default=None, description="Optional type of the value")


class PartyId(TypedValue):
    """Identifier of a trading partner."""


class Service(TypedValue):
    """The business service a User Message is exchanged for."""


class Property(HB2BBaseModel):
    """A named, optionally typed property.

    Attributes:
        name: Property name, never empty
        value: Property value, never empty
        type: Optional type of the property value

    Example:
        >>> Property(name="p1", value="v1")
        >>> Property(name="p2", value="v2", type="t2")
    """

    name: str = Field(..., min_length=1, description="Property name")
    value: str = Field(..., min_length=1, description="Property value")
    type: OptionalType = Field(default=None, description="Optional type of the value")


class EbmsError(HB2BBaseModel):
    """An ebMS error contained in an Error Signal.

    Only encoded into headers, never parsed back.
    """

    severity: Severity = Field(..., description="Severity of the error")
    error_code: str = Field(..., min_length=1, description="ebMS error code, e.g. EBMS:0004")
    error_detail: str | None = Field(default=None, description="Additional error detail")


class TradingPartner(HB2BBaseModel):
    """Sender or Receiver of a User Message."""

    party_id: PartyId | None = Field(default=None, description="Identifier of the partner")
    role: str | None = Field(default=None, description="Role the partner acts in")


class CollaborationInfo(HB2BBaseModel):
    """Business context of a User Message."""

    conversation_id: str | None = None
    service: Service | None = None
    action: str | None = None


class SchemaReference(HB2BBaseModel):
    """Reference to the schema that defines the content of a payload."""

    namespace: str | None = None
    version: str | None = None
    location: str | None = None


class Payload(HB2BBaseModel):
    """Metadata of a payload, plus the location of its content.

    Attributes:
        mime_type: MIME type of the payload content
        containment: How the payload is contained in the ebMS message
        properties: Part properties of the payload
        schema_reference: Optional reference to the schema of the content
        content_location: File containing the payload bytes
    """

    mime_type: str | None = None
    containment: Containment = Containment.ATTACHMENT
    properties: list[Property] = Field(default_factory=list)
    schema_reference: SchemaReference | None = None
    content_location: Path | None = Field(
        default=None, description="File that holds the payload content"
    )
