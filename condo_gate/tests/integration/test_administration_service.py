"""
Integration tests for house and people administration over demo data.
"""

import pytest

from condo_gate.application.administration import AdministrationService, VehicleDraft
from condo_gate.domain.exceptions import EntityNotFoundError, ValidationError
from condo_gate.domain.models import Direction, PersonSubtype, PersonType


@pytest.fixture
def admin(container) -> AdministrationService:
    return container.administration


class TestHouses:
    """Tests for house administration."""

    def test_create_and_delete_empty_house(self, admin: AdministrationService):
        """Test an empty house can be created and deleted."""
        house = admin.create_house("Rua", "Nova", "7")

        assert house.address == "Rua Nova, 7"
        admin.delete_house(house.id)
        with pytest.raises(EntityNotFoundError):
            admin.get_house(house.id)

    def test_delete_with_dependents_rejected(self, admin: AdministrationService):
        """Test a house with people cannot be deleted."""
        with pytest.raises(ValidationError, match="house has dependents"):
            admin.delete_house("1")

        assert admin.get_house("1").residents == ["1", "2"]

    def test_blank_number_rejected(self, admin: AdministrationService):
        """Test a house without number is rejected."""
        before = len(admin.list_houses())

        with pytest.raises(ValidationError):
            admin.create_house("Rua", "Nova", "  ")

        assert len(admin.list_houses()) == before

    def test_grouped_by_street(self, admin: AdministrationService):
        """Test houses are grouped by street and sorted."""
        grouped = admin.houses_by_street()

        assert list(grouped) == [
            "Avenida Principal",
            "Rua das Acácias",
            "Rua das Flores",
            "Rua dos Ipês",
        ]

    def test_address_edit_does_not_touch_history(self, admin: AdministrationService, container):
        """Test editing an address leaves past events as they were."""
        admin.update_house("1", number="11")

        assert admin.get_house("1").address == "Rua das Flores, 11"
        assert container.ledger.events[-1].house_address == "Rua das Flores, 10"


class TestPeople:
    """Tests for people administration."""

    def test_create_resident_links_house(self, admin: AdministrationService):
        """Test a new resident is linked to their house."""
        person = admin.create_person(
            name="Nova Moradora",
            national_id="123.123.123-12",
            type=PersonType.RESIDENT,
            house_id="3",
            vehicles=[VehicleDraft(plate="abc-9999", model="Kia")],
        )

        assert person.id in admin.get_house("3").residents
        assert person.vehicles[0].plate == "ABC9999"
        assert person.vehicles[0].owner_id == person.id

    def test_new_vehicle_ids_are_globally_unique(self, admin: AdministrationService):
        """Test new vehicles never share an id with existing ones."""
        person = admin.create_person(
            name="Frota", national_id="1", type=PersonType.RESIDENT, house_id="3",
            vehicles=[VehicleDraft("AAA1111", ""), VehicleDraft("BBB2222", "")],
        )

        existing = [v.id for p in admin.list_people() if p.id != person.id for v in p.vehicles]
        assert not set(v.id for v in person.vehicles) & set(existing)

    def test_authorized_requires_subtype(self, admin: AdministrationService):
        """Test an Authorized person without subtype is not stored."""
        before = len(admin.list_people())

        with pytest.raises(ValidationError, match="subtype required for Authorized person"):
            admin.create_person(
                name="Sem Tipo",
                national_id="000",
                type=PersonType.AUTHORIZED,
                house_id="1",
            )

        assert len(admin.list_people()) == before
        assert admin.get_house("1").authorized == ["3"]

    def test_unknown_house(self, admin: AdministrationService):
        """Test a person cannot join an unknown house."""
        with pytest.raises(EntityNotFoundError):
            admin.create_person(name="X", national_id="1", type=PersonType.RESIDENT, house_id="99")

    def test_move_and_change_type_relinks(self, admin: AdministrationService):
        """Test moving house and changing type moves the link."""
        admin.update_person(
            "2",
            name="Ana Santos",
            national_id="555.666.777-88",
            type=PersonType.AUTHORIZED,
            subtype=PersonSubtype.VISITOR,
            house_id="3",
        )

        assert "2" not in admin.get_house("1").residents
        assert "2" in admin.get_house("3").authorized
        assert admin.get_person("2").vehicles[0].plate == "DEF5678"

    def test_duplicate_plates_rejected_without_changes(self, admin: AdministrationService):
        """Test repeated plates in a fleet leave the person unchanged."""
        with pytest.raises(ValidationError):
            admin.update_person(
                "1",
                name="Carlos Silva",
                national_id="111.222.333-44",
                type=PersonType.RESIDENT,
                house_id="1",
                vehicles=[VehicleDraft("ABC1234", ""), VehicleDraft("abc-1234", "")],
            )

        assert len(admin.get_person("1").vehicles) == 1

    def test_delete_person_unlinks_and_drops_vehicles(self, admin: AdministrationService, container):
        """Test deleting a person unlinks them and drops their vehicles."""
        container.registration.register("1", Direction.ENTRY, vehicle_id="1")

        admin.delete_person("1")

        assert "1" not in admin.get_house("1").residents
        assert all(entry.vehicle_id != "1" for entry in container.registration.directory())
        # history keeps the snapshot
        assert container.ledger.events[0].vehicle_plate == "ABC1234"

    def test_house_deletable_after_people_removed(self, admin: AdministrationService):
        """Test a house becomes deletable once its people are gone."""
        admin.delete_person("7")
        admin.delete_person("8")

        admin.delete_house("3")

        assert all(house.id != "3" for house in admin.list_houses())

    def test_search_by_name_or_national_id(self, admin: AdministrationService):
        """Test people search by name or national id."""
        assert [p.id for p in admin.list_people("costa")] == ["7", "8"]
        assert [p.id for p in admin.list_people("444.333")] == ["4"]


class TestVehicles:
    """Tests for add/remove vehicle."""

    def test_add_vehicle(self, admin: AdministrationService):
        """Test adding a vehicle normalizes its plate."""
        vehicle = admin.add_vehicle("8", "new-0001", "Jeep")

        assert vehicle.plate == "NEW0001"
        assert admin.get_person("8").vehicles == [vehicle]

    def test_duplicate_plate_in_fleet(self, admin: AdministrationService):
        """Test a plate already in the fleet is rejected."""
        with pytest.raises(ValidationError) as exc:
            admin.add_vehicle("1", "abc1234", "Copy")

        assert exc.value.invariant == "plate_unique"

    def test_same_plate_other_owner_allowed(self, admin: AdministrationService):
        """Test another owner may register the same plate."""
        vehicle = admin.add_vehicle("2", "ABC1234", "Shared plate")
        assert vehicle.owner_id == "2"

    def test_malformed_plate(self, admin: AdministrationService):
        """Test a malformed plate leaves the fleet unchanged."""
        with pytest.raises(ValidationError):
            admin.add_vehicle("8", "!!", "Bad")

        assert admin.get_person("8").vehicles == []

    def test_remove_vehicle(self, admin: AdministrationService):
        """Test removing a vehicle and removing it again."""
        admin.remove_vehicle("1", "1")

        assert admin.get_person("1").vehicles == []
        with pytest.raises(EntityNotFoundError):
            admin.remove_vehicle("1", "1")


class TestIdentifiers:
    """Tests for id allocation after deletes."""

    def test_deleted_person_id_not_reused(self, admin: AdministrationService, container):
        """Test a new person never takes the id of a deleted one."""
        event = container.registration.register("10", Direction.ENTRY)
        admin.delete_person("10")

        newcomer = admin.create_person(
            name="Stranger", national_id="555", type=PersonType.RESIDENT, house_id="3"
        )

        assert newcomer.id == "11"
        assert event.person_id == "10"
        assert container.ledger.events[0].person_id != newcomer.id

    def test_deleted_house_id_not_reused(self, admin: AdministrationService):
        """Test a new house never takes the id of a deleted one."""
        first = admin.create_house("Rua", "Nova", "1")
        admin.delete_house(first.id)

        second = admin.create_house("Rua", "Nova", "2")

        assert int(second.id) > int(first.id)

    def test_removed_vehicle_id_not_reused(self, admin: AdministrationService):
        """Test a new vehicle never takes the id of a removed one."""
        admin.remove_vehicle("9", "7")

        vehicle = admin.add_vehicle("8", "NEW0002", "Gol")

        assert vehicle.id == "8"

    def test_repeated_vehicle_id_rejected(self, admin: AdministrationService):
        """Test a fleet listing one vehicle id twice is rejected unchanged."""
        current = admin.get_person("1")

        with pytest.raises(ValidationError) as exc:
            admin.update_person(
                "1",
                name=current.name,
                national_id=current.national_id,
                type=current.type,
                house_id=current.house_id,
                vehicles=[
                    VehicleDraft("AAA1111", "Civic", id="1"),
                    VehicleDraft("BBB2222", "Uno", id="1"),
                ],
            )

        assert exc.value.invariant == "vehicle_id_unique"
        assert [v.id for v in admin.get_person("1").vehicles] == ["1"]
