"""
Unit tests for the directory index.

Tests index construction, search and the two-step selection.
"""

import pytest

from condo_gate.domain.directory import (
    EntryKind,
    build_index,
    choose_vehicle,
    search_index,
    select_entry,
)
from condo_gate.domain.exceptions import PreconditionError
from condo_gate.domain.models import Person


class TestBuildIndex:
    """Tests for build_index."""

    def test_person_then_vehicles_in_order(self, resident: Person, employee: Person):
        """Test each person is followed by their vehicles."""
        entries = build_index([resident, employee])

        assert [entry.key for entry in entries] == [
            "person-p1",
            "vehicle-v1",
            "vehicle-v2",
            "person-p2",
        ]

    def test_vehicle_label_has_plate_and_owner(self, resident: Person):
        """Test vehicle labels show plate and owner."""
        entries = build_index([resident])

        assert entries[1].label == "ABC1234 - Carlos Silva"
        assert entries[1].kind == EntryKind.VEHICLE
        assert entries[1].vehicle.model == "Honda Civic"

    def test_person_label_is_name(self, employee: Person):
        """Test person labels are the name."""
        (entry,) = build_index([employee])
        assert entry.label == "José da Limpeza"
        assert entry.vehicle is None

    def test_empty_input(self):
        """Test no people means an empty index."""
        assert build_index([]) == []


class TestSearchIndex:
    """Tests for search_index."""

    @pytest.fixture
    def entries(self, resident: Person, employee: Person):
        return build_index([resident, employee])

    def test_blank_query_returns_everything(self, entries):
        """Test a blank query keeps every entry."""
        assert search_index(entries, "") == entries
        assert search_index(entries, None) == entries
        assert search_index(entries, "   ") == entries

    def test_case_insensitive_plate_match(self, entries):
        """Test plates match regardless of case."""
        result = search_index(entries, "abc1")
        assert [entry.key for entry in result] == ["vehicle-v1"]

    def test_name_matches_person_and_vehicle_entries(self, entries):
        """Test a name matches the person and their vehicles."""
        result = search_index(entries, "carlos")
        assert [entry.key for entry in result] == ["person-p1", "vehicle-v1", "vehicle-v2"]

    def test_no_match(self, entries):
        """Test an unmatched query returns nothing."""
        assert search_index(entries, "nobody") == []


class TestSelection:
    """Tests for select_entry and choose_vehicle."""

    def test_vehicle_entry_commits_vehicle(self, resident: Person):
        """Test a vehicle entry selects its vehicle."""
        entry = build_index([resident])[2]

        selection = select_entry(entry)

        assert selection.person.id == "p1"
        assert selection.vehicle.id == "v2"
        assert selection.needs_vehicle_choice is False
        assert selection.label == "XYZ9876 - Carlos Silva"

    def test_person_entry_with_vehicles_needs_choice(self, resident: Person):
        """Test a vehicle owner needs a vehicle choice."""
        selection = select_entry(build_index([resident])[0])

        assert selection.vehicle is None
        assert selection.needs_vehicle_choice is True

    def test_person_without_vehicles_needs_no_choice(self, employee: Person):
        """Test a person without vehicles needs no choice."""
        selection = select_entry(build_index([employee])[0])

        assert selection.vehicle is None
        assert selection.needs_vehicle_choice is False

    def test_choose_owned_vehicle(self, resident: Person):
        """Test choosing one of the person's vehicles."""
        selection = choose_vehicle(select_entry(build_index([resident])[0]), "v1")

        assert selection.vehicle.plate == "ABC1234"
        assert selection.needs_vehicle_choice is False

    def test_choose_foreign_vehicle_rejected(self, resident: Person):
        """Test choosing someone else's vehicle is rejected."""
        selection = select_entry(build_index([resident])[0])

        with pytest.raises(PreconditionError):
            choose_vehicle(selection, "v-unknown")
