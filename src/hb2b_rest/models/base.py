"""Base Pydantic model configuration for message-unit records.

All records inherit from HB2BBaseModel to ensure consistent behavior:
- Immutability (frozen=True) so a message unit can be shared between
  concurrent deliveries without copying
- Strict validation (extra="forbid") to catch typos and invalid fields
- Flexible field naming (populate_by_name=True) for alias support
"""

from pydantic import BaseModel, ConfigDict


class HB2BBaseModel(BaseModel):
    """Base model for all message-unit records.

    Example:
        >>> class MyModel(HB2BBaseModel):
        ...     name: str
        >>>
        >>> obj = MyModel(name="test")
        >>> obj.name = "other"  # Raises ValidationError (frozen)
        Traceback (most recent call last):
        ...
        pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(
        # Immutability: prevents accidental mutations after creation
        frozen=True,
        # Strict validation: reject unknown fields to catch typos
        extra="forbid",
        populate_by_name=True,
        use_enum_values=False,
        validate_default=True,
    )
