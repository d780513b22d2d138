"""
Unit tests for domain invariants.

Tests predicates, normalizers and the check_* validators.
"""

from dataclasses import replace

import pytest

from condo_gate.domain.exceptions import ValidationError
from condo_gate.domain.models import House, Person, PersonSubtype, PersonType, Vehicle
from condo_gate.domain.validation import (
    check_house,
    check_house_deletable,
    check_house_links,
    check_person,
    check_vehicle,
    format_house_address,
    is_authorized_linkable,
    is_house_deletable,
    is_resident_linkable,
    normalize_national_id,
    normalize_plate,
    vehicle_plate_unique,
)


class TestNormalization:
    """Tests for plate and national id normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("abc1234", "ABC1234"),
            ("ABC-1234", "ABC1234"),
            (" abc 1d23 ", "ABC1D23"),
            ("", ""),
        ],
    )
    def test_normalize_plate(self, raw: str, expected: str):
        """Test plates are uppercased and stripped of separators."""
        assert normalize_plate(raw) == expected

    def test_normalize_national_id_keeps_digits(self):
        """Test national ids keep only their digits."""
        assert normalize_national_id("123.456.789-00") == "12345678900"
        assert normalize_national_id("12345678900") == "12345678900"

    def test_format_house_address(self, house: House):
        """Test the house address format."""
        assert format_house_address(house) == "Rua das Flores, 10"


class TestLinkPredicates:
    """Tests for resident/authorized link predicates."""

    def test_resident_is_resident_linkable(self, resident: Person):
        """Test a resident may fill a resident slot."""
        assert is_resident_linkable(resident) is True
        assert is_authorized_linkable(resident) is False

    def test_employee_is_authorized_linkable(self, employee: Person):
        """Test an employee may fill an authorized slot."""
        assert is_authorized_linkable(employee) is True
        assert is_resident_linkable(employee) is False

    def test_authorized_without_subtype_is_not_linkable(self, employee: Person):
        """Test an Authorized person without subtype cannot be linked."""
        broken = replace(employee, subtype=None)
        assert is_authorized_linkable(broken) is False

    def test_house_with_dependents_not_deletable(self, house: House):
        """Test a house with people is not deletable."""
        assert is_house_deletable(house) is False

    def test_empty_house_deletable(self, house: House):
        """Test an empty house is deletable."""
        empty = replace(house, residents=[], authorized=[])
        assert is_house_deletable(empty) is True


class TestPlateUniqueness:
    """Tests for vehicle_plate_unique."""

    def test_existing_plate_not_unique(self, resident: Person):
        """Test a plate already in the fleet is not unique."""
        assert vehicle_plate_unique(resident, "abc-1234") is False

    def test_new_plate_unique(self, resident: Person):
        """Test a new plate is unique."""
        assert vehicle_plate_unique(resident, "NEW0001") is True

    def test_edited_vehicle_excluded(self, resident: Person):
        """Test the edited vehicle does not clash with itself."""
        assert vehicle_plate_unique(resident, "ABC1234", exclude_vehicle_id="v1") is True


class TestCheckPerson:
    """Tests for check_person."""

    def test_valid_resident_passes(self, resident: Person):
        """Test a valid resident passes."""
        check_person(resident)

    def test_authorized_requires_subtype(self, employee: Person):
        """Test an Authorized person needs a subtype."""
        with pytest.raises(ValidationError, match="subtype required for Authorized person") as exc:
            check_person(replace(employee, subtype=None))
        assert exc.value.invariant == "subtype_required"

    def test_resident_rejects_subtype(self, resident: Person):
        """Test a resident may not carry a subtype."""
        with pytest.raises(ValidationError) as exc:
            check_person(replace(resident, subtype=PersonSubtype.VISITOR))
        assert exc.value.invariant == "subtype_forbidden"

    def test_blank_name_rejected(self, resident: Person):
        """Test a blank name is rejected."""
        with pytest.raises(ValidationError) as exc:
            check_person(replace(resident, name="   "))
        assert exc.value.invariant == "name_required"

    def test_duplicate_plate_rejected(self, resident: Person):
        """Test a repeated plate is rejected."""
        duplicate = Vehicle(id="v3", plate="ABC1234", model="Other", owner_id="p1")
        person = replace(resident, vehicles=[*resident.vehicles, duplicate])
        with pytest.raises(ValidationError) as exc:
            check_person(person)
        assert exc.value.invariant == "plate_unique"

    def test_foreign_vehicle_rejected(self, resident: Person):
        """Test a vehicle owned by someone else is rejected."""
        foreign = Vehicle(id="v9", plate="ZZZ0001", model="Other", owner_id="someone")
        with pytest.raises(ValidationError) as exc:
            check_person(replace(resident, vehicles=[foreign]))
        assert exc.value.invariant == "vehicle_owner"

    def test_duplicate_vehicle_id_rejected(self, resident: Person):
        """Test two vehicles sharing an id are rejected."""
        twin = Vehicle(id="v1", plate="NEW0001", model="Other", owner_id="p1")
        with pytest.raises(ValidationError) as exc:
            check_person(replace(resident, vehicles=[*resident.vehicles, twin]))
        assert exc.value.invariant == "vehicle_id_unique"


class TestCheckVehicle:
    """Tests for check_vehicle."""

    @pytest.mark.parametrize("plate", ["abc1234", "AB", "ABC-1234", "ABCDEFGHIJK"])
    def test_malformed_plate_rejected(self, plate: str):
        """Test malformed plates are rejected."""
        with pytest.raises(ValidationError) as exc:
            check_vehicle(Vehicle(id="v", plate=plate, model="", owner_id="p1"))
        assert exc.value.invariant == "plate_format"

    def test_valid_plate_passes(self):
        """Test a well-formed plate passes."""
        check_vehicle(Vehicle(id="v", plate="ABC1D23", model="", owner_id="p1"))


class TestCheckHouse:
    """Tests for house checks."""

    def test_links_must_be_disjoint(self, house: House):
        """Test nobody is both resident and authorized."""
        with pytest.raises(ValidationError) as exc:
            check_house(replace(house, authorized=["p1"]))
        assert exc.value.invariant == "links_disjoint"

    def test_links_match_types(self, house: House, resident: Person, employee: Person):
        """Test links matching the people's types pass."""
        check_house_links(house, {resident.id: resident, employee.id: employee})

    def test_resident_slot_rejects_authorized_person(
        self, house: House, resident: Person, employee: Person
    ):
        """Test an Authorized person in a resident slot is rejected."""
        swapped = replace(house, residents=["p2"], authorized=["p1"])
        with pytest.raises(ValidationError) as exc:
            check_house_links(swapped, {resident.id: resident, employee.id: employee})
        assert exc.value.invariant == "resident_type"

    def test_unknown_linked_person_rejected(self, house: House, resident: Person):
        """Test a link to an unknown person is rejected."""
        with pytest.raises(ValidationError) as exc:
            check_house_links(house, {resident.id: resident})
        assert exc.value.invariant == "authorized_type"

    def test_delete_with_dependents_rejected(self, house: House):
        """Test deleting a house with people is rejected."""
        with pytest.raises(ValidationError, match="house has dependents"):
            check_house_deletable(house)

    def test_missing_number_rejected(self, house: House):
        """Test a house without number is rejected."""
        with pytest.raises(ValidationError) as exc:
            check_house(replace(house, number=" "))
        assert exc.value.invariant == "number_required"
