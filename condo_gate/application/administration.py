"""
Administration use case: houses, people and their vehicles.

Every write builds the new records on copies, checks the domain
invariants against them and only then touches the repositories, so a
rejected change leaves the stores exactly as they were.
"""

import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace

from condo_gate.core.logging import get_logger
from condo_gate.domain.exceptions import EntityNotFoundError, ValidationError
from condo_gate.domain.models import House, Person, PersonSubtype, PersonType, Vehicle
from condo_gate.domain.repository import HouseRepository, PersonRepository
from condo_gate.domain.validation import (
    check_house,
    check_house_deletable,
    check_house_links,
    check_person,
    check_vehicle,
    normalize_plate,
    vehicle_plate_unique,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class VehicleDraft:
    """
    Vehicle as submitted by an administrator.

    Attributes:
        plate: Plate in any format; normalized on save.
        model: Model description.
        id: Existing vehicle id when editing, None for a new vehicle.
    """

    plate: str
    model: str
    id: str | None = None


def _numeric_ids(existing: Iterable[str]) -> list[int]:
    return [int(value) for value in existing if value.isdigit()]


class _IdSequence:
    """
    Numeric ids that are never handed out twice.

    The high-water mark only grows, so deleting the newest record does not
    free its id for the next one; access events keep pointing at the
    record they were registered for.
    """

    def __init__(self, existing: Iterable[str] = ()):
        self._last = max(_numeric_ids(existing), default=0)

    def next(self, existing: Iterable[str] = ()) -> str:
        self._last = max([self._last, *_numeric_ids(existing)]) + 1
        return str(self._last)


def _link_lists(house: House, person: Person) -> list[str]:
    if person.type == PersonType.RESIDENT:
        return house.residents
    return house.authorized


def _unlink(house: House, person_id: str) -> None:
    house.residents = [pid for pid in house.residents if pid != person_id]
    house.authorized = [pid for pid in house.authorized if pid != person_id]


class AdministrationService:
    """
    CRUD over houses and people with link maintenance.

    A person's house membership is mirrored in the house's ``residents``
    or ``authorized`` list depending on the person's type; this service
    keeps both sides in step.
    """

    def __init__(self, people: PersonRepository, houses: HouseRepository):
        self._people = people
        self._houses = houses
        self._lock = threading.Lock()
        existing = people.list()
        self._person_ids = _IdSequence(p.id for p in existing)
        self._house_ids = _IdSequence(h.id for h in houses.list())
        self._vehicle_ids = _IdSequence(v.id for p in existing for v in p.vehicles)

    # Houses

    def list_houses(self) -> list[House]:
        return self._houses.list()

    def houses_by_street(self) -> dict[str, list[House]]:
        """
        Houses grouped by street, streets and numbers in ascending order.

        Returns:
            dict: ``"{street_type} {street_name}"`` to the houses on it.
        """
        grouped: dict[str, list[House]] = {}
        for house in sorted(self._houses.list(), key=lambda h: (h.street, h.number)):
            grouped.setdefault(house.street, []).append(house)
        return grouped

    def get_house(self, house_id: str) -> House:
        house = self._houses.get(house_id)
        if house is None:
            raise EntityNotFoundError("house", house_id)
        return house

    def create_house(self, street_type: str, street_name: str, number: str) -> House:
        """
        Create an empty house.

        Raises:
            ValidationError: If a street field or the number is blank.
        """
        with self._lock:
            house = House(
                id=self._house_ids.next(h.id for h in self._houses.list()),
                street_type=street_type.strip(),
                street_name=street_name.strip(),
                number=number.strip(),
            )
            check_house(house)
            self._houses.insert(house)

        logger.info("house_created", house_id=house.id, address=house.address)
        return house

    def update_house(
        self,
        house_id: str,
        street_type: str | None = None,
        street_name: str | None = None,
        number: str | None = None,
    ) -> House:
        """
        Edit the address of a house.

        Links are not editable here; they follow the people's records.
        Past access events keep the address they were registered with.
        """
        with self._lock:
            house = self.get_house(house_id)
            if street_type is not None:
                house.street_type = street_type.strip()
            if street_name is not None:
                house.street_name = street_name.strip()
            if number is not None:
                house.number = number.strip()
            check_house(house)
            self._houses.update(house)

        logger.info("house_updated", house_id=house.id, address=house.address)
        return house

    def delete_house(self, house_id: str) -> None:
        """
        Delete a house nobody is linked to.

        Raises:
            EntityNotFoundError: If the house does not exist.
            ValidationError: "house has dependents" while people are linked.
        """
        with self._lock:
            house = self.get_house(house_id)
            check_house_deletable(house)
            self._houses.delete(house_id)

        logger.info("house_deleted", house_id=house_id)

    def house_members(self, house_id: str) -> tuple[list[Person], list[Person]]:
        """Resident and authorized people linked to a house, in link order."""
        house = self.get_house(house_id)
        people = {person.id: person for person in self._people.list()}
        return (
            [people[pid] for pid in house.residents if pid in people],
            [people[pid] for pid in house.authorized if pid in people],
        )

    # People

    def list_people(self, query: str | None = None) -> list[Person]:
        """
        People whose name (case-insensitive) or national id contains ``query``.
        """
        people = self._people.list()
        term = (query or "").strip()
        if not term:
            return people
        lowered = term.casefold()
        return [
            person
            for person in people
            if lowered in person.name.casefold() or term in person.national_id
        ]

    def get_person(self, person_id: str) -> Person:
        person = self._people.get(person_id)
        if person is None:
            raise EntityNotFoundError("person", person_id)
        return person

    def _build_vehicles(
        self,
        owner: Person,
        drafts: Iterable[VehicleDraft],
    ) -> list[Vehicle]:
        taken = [v.id for p in self._people.list() for v in p.vehicles]
        vehicles: list[Vehicle] = []
        kept: set[str] = set()
        for draft in drafts:
            vehicle_id = draft.id
            if vehicle_id is not None and vehicle_id in kept:
                raise ValidationError(
                    f"vehicle listed twice: {vehicle_id}",
                    invariant="vehicle_id_unique",
                )
            if vehicle_id is None or owner.find_vehicle(vehicle_id) is None:
                vehicle_id = self._vehicle_ids.next(taken)
            kept.add(vehicle_id)
            vehicles.append(
                Vehicle(
                    id=vehicle_id,
                    plate=normalize_plate(draft.plate),
                    model=draft.model.strip(),
                    owner_id=owner.id,
                )
            )
        return vehicles

    def _check_links(self, houses: Iterable[House], people: dict[str, Person]) -> None:
        for house in houses:
            check_house_links(house, people)

    def create_person(
        self,
        name: str,
        national_id: str,
        type: PersonType,
        house_id: str,
        subtype: PersonSubtype | None = None,
        vehicles: Iterable[VehicleDraft] = (),
    ) -> Person:
        """
        Register a person, link them to their house and store their vehicles.

        Args:
            name: Full name.
            national_id: National id as typed.
            type: Resident or Authorized.
            house_id: House the person belongs to.
            subtype: Employee or Visitor; required for Authorized only.
            vehicles: Vehicles to register for the person.

        Returns:
            Person: The stored person.

        Raises:
            EntityNotFoundError: If the house does not exist.
            ValidationError: If any person, vehicle or link invariant fails.
        """
        with self._lock:
            house = self.get_house(house_id)
            person = Person(
                id=self._person_ids.next(p.id for p in self._people.list()),
                name=name.strip(),
                national_id=national_id.strip(),
                type=PersonType(type),
                subtype=PersonSubtype(subtype) if subtype else None,
                house_id=house.id,
            )
            person.vehicles = self._build_vehicles(person, vehicles)
            check_person(person)

            _link_lists(house, person).append(person.id)
            people = {p.id: p for p in self._people.list()}
            people[person.id] = person
            self._check_links([house], people)

            self._people.insert(person)
            self._houses.update(house)

        logger.info(
            "person_created",
            person_id=person.id,
            type=person.type.value,
            house_id=house.id,
            vehicles=len(person.vehicles),
        )
        return person

    def update_person(
        self,
        person_id: str,
        name: str,
        national_id: str,
        type: PersonType,
        house_id: str,
        subtype: PersonSubtype | None = None,
        vehicles: Iterable[VehicleDraft] | None = None,
    ) -> Person:
        """
        Replace a person's details.

        Moving to another house or changing type moves the person's link
        accordingly. ``vehicles=None`` keeps the current fleet; a list
        replaces it, keeping ids of drafts that name an owned vehicle.
        """
        with self._lock:
            current = self.get_person(person_id)
            target_house = self.get_house(house_id)

            updated = replace(
                current,
                name=name.strip(),
                national_id=national_id.strip(),
                type=PersonType(type),
                subtype=PersonSubtype(subtype) if subtype else None,
                house_id=target_house.id,
                vehicles=list(current.vehicles),
            )
            if vehicles is not None:
                updated.vehicles = self._build_vehicles(current, vehicles)
            check_person(updated)

            touched: dict[str, House] = {target_house.id: target_house}
            if current.house_id != target_house.id:
                old_house = self._houses.get(current.house_id)
                if old_house is not None:
                    touched[old_house.id] = old_house
            for house in touched.values():
                _unlink(house, person_id)
            _link_lists(target_house, updated).append(person_id)

            people = {p.id: p for p in self._people.list()}
            people[person_id] = updated
            self._check_links(touched.values(), people)

            self._people.update(updated)
            for house in touched.values():
                self._houses.update(house)

        logger.info(
            "person_updated",
            person_id=person_id,
            type=updated.type.value,
            house_id=updated.house_id,
            moved=current.house_id != updated.house_id,
        )
        return updated

    def delete_person(self, person_id: str) -> None:
        """Delete a person, unlinking them from their house. Their vehicles go too."""
        with self._lock:
            person = self.get_person(person_id)
            house = self._houses.get(person.house_id)
            if house is not None:
                _unlink(house, person_id)
                self._houses.update(house)
            self._people.delete(person_id)

        logger.info(
            "person_deleted",
            person_id=person_id,
            vehicles_removed=len(person.vehicles),
        )

    def add_vehicle(self, person_id: str, plate: str, model: str) -> Vehicle:
        """
        Add a vehicle to a person's fleet.

        Raises:
            ValidationError: If the plate is malformed or already in the fleet.
        """
        with self._lock:
            person = self.get_person(person_id)
            if not vehicle_plate_unique(person, plate):
                raise ValidationError(
                    f"plate already registered for this person: {normalize_plate(plate)}",
                    invariant="plate_unique",
                )
            (vehicle,) = self._build_vehicles(person, [VehicleDraft(plate, model)])
            check_vehicle(vehicle)
            person.vehicles.append(vehicle)
            self._people.update(person)

        logger.info("vehicle_added", person_id=person_id, vehicle_id=vehicle.id, plate=vehicle.plate)
        return vehicle

    def remove_vehicle(self, person_id: str, vehicle_id: str) -> None:
        """
        Remove a vehicle from a person's fleet.

        Past access events keep the plate they were registered with.
        """
        with self._lock:
            person = self.get_person(person_id)
            if person.find_vehicle(vehicle_id) is None:
                raise EntityNotFoundError("vehicle", vehicle_id)
            person.vehicles = [v for v in person.vehicles if v.id != vehicle_id]
            self._people.update(person)

        logger.info("vehicle_removed", person_id=person_id, vehicle_id=vehicle_id)
