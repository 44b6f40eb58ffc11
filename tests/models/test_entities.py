"""Tests for the metadata records."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from hb2b_rest.models.entities import (
    EbmsError,
    PartyId,
    Payload,
    Property,
    Service,
    TypedValue,
)
from hb2b_rest.models.enums import Containment, Severity


class TestTypedValue:
    """Tests for TypedValue and its subclasses."""

    def test_empty_type_is_none(self) -> None:
        assert TypedValue(value="v", type="").type is None

    def test_empty_value_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PartyId(value="")

    def test_subclasses(self) -> None:
        assert isinstance(PartyId(value="p"), TypedValue)
        assert isinstance(Service(value="s", type="t"), TypedValue)

    def test_frozen(self) -> None:
        party_id = PartyId(value="p")

        with pytest.raises(ValidationError):
            party_id.value = "other"  # type: ignore[misc]


class TestProperty:
    """Tests for Property."""

    def test_typed_property(self) -> None:
        prop = Property(name="p1", value="v1", type="t1")

        assert (prop.name, prop.value, prop.type) == ("p1", "v1", "t1")

    @pytest.mark.parametrize("field", ["name", "value"])
    def test_empty_name_or_value_is_rejected(self, field: str) -> None:
        data = {"name": "p1", "value": "v1", field: ""}

        with pytest.raises(ValidationError):
            Property(**data)

    def test_extra_fields_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Property(name="p1", value="v1", unit="kg")  # type: ignore[call-arg]


class TestEbmsError:
    """Tests for EbmsError."""

    def test_severity_from_string(self) -> None:
        error = EbmsError(severity="warning", error_code="EBMS:0006")  # type: ignore[arg-type]

        assert error.severity is Severity.WARNING
        assert error.error_detail is None

    def test_unknown_severity_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EbmsError(severity="fatal", error_code="EBMS:0006")  # type: ignore[arg-type]


class TestPayload:
    """Tests for Payload."""

    def test_defaults(self) -> None:
        payload = Payload()

        assert payload.containment is Containment.ATTACHMENT
        assert payload.properties == []
        assert payload.content_location is None

    def test_content_location_from_string(self, tmp_path: Path) -> None:
        payload = Payload(content_location=str(tmp_path / "p.bin"))  # type: ignore[arg-type]

        assert payload.content_location == tmp_path / "p.bin"
