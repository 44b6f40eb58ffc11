"""Message-unit records for the REST back-end integration.

This module provides the Pydantic models for the metadata that is carried
in the protocol headers and the message units that are delivered.
"""

from hb2b_rest.models.base import HB2BBaseModel
from hb2b_rest.models.entities import (
    CollaborationInfo,
    EbmsError,
    PartyId,
    Payload,
    Property,
    SchemaReference,
    Service,
    TradingPartner,
    TypedValue,
)
from hb2b_rest.models.enums import Containment, Severity
from hb2b_rest.models.message_units import (
    ErrorMessage,
    MessageUnit,
    MessageUnitAdapter,
    MessageUnitBase,
    Receipt,
    SignalMessage,
    UserMessage,
)

__all__ = [
    "CollaborationInfo",
    "Containment",
    "EbmsError",
    "ErrorMessage",
    "HB2BBaseModel",
    "MessageUnit",
    "MessageUnitAdapter",
    "MessageUnitBase",
    "PartyId",
    "Payload",
    "Property",
    "Receipt",
    "SchemaReference",
    "Service",
    "SignalMessage",
    "TradingPartner",
    "TypedValue",
    "UserMessage",
]
