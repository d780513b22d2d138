"""
Directory index used to resolve who is passing through the gate.

Flattens people and their vehicles into one searchable list so the
gatekeeper can type either a name or a plate.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from condo_gate.domain.exceptions import PreconditionError
from condo_gate.domain.models import Person, Vehicle


class EntryKind(str, Enum):
    """Kind of directory entry."""

    PERSON = "person"
    VEHICLE = "vehicle"


@dataclass(frozen=True)
class DirectoryEntry:
    """
    One searchable row of the directory.

    Attributes:
        key: Stable key, ``person-<id>`` or ``vehicle-<id>``.
        label: Text matched by searches and shown to the operator.
        kind: Person or vehicle entry.
        person: Owning person (the person itself for person entries).
        vehicle_id: Vehicle id, for vehicle entries only.
    """

    key: str
    label: str
    kind: EntryKind
    person: Person
    vehicle_id: str | None = None

    @property
    def vehicle(self) -> Vehicle | None:
        if self.vehicle_id is None:
            return None
        return self.person.find_vehicle(self.vehicle_id)


@dataclass(frozen=True)
class Selection:
    """
    Person (and optionally vehicle) chosen for a registration.

    Attributes:
        person: Selected person.
        vehicle: Vehicle committed to, or None.
        needs_vehicle_choice: True when a person entry was picked and the
            person owns vehicles the operator may still pick from.
    """

    person: Person
    vehicle: Vehicle | None = None
    needs_vehicle_choice: bool = False

    @property
    def label(self) -> str:
        if self.vehicle is not None:
            return f"{self.vehicle.plate} - {self.person.name}"
        return self.person.name


def build_index(people: Iterable[Person]) -> list[DirectoryEntry]:
    """
    Build the flat directory for a collection of people.

    Order is deterministic: people in input order, each person's vehicles
    in stored order immediately after the person entry.

    Args:
        people: People to index.

    Returns:
        list: Directory entries.
    """
    entries: list[DirectoryEntry] = []
    for person in people:
        entries.append(
            DirectoryEntry(
                key=f"person-{person.id}",
                label=person.name,
                kind=EntryKind.PERSON,
                person=person,
            )
        )
        for vehicle in person.vehicles:
            entries.append(
                DirectoryEntry(
                    key=f"vehicle-{vehicle.id}",
                    label=f"{vehicle.plate} - {person.name}",
                    kind=EntryKind.VEHICLE,
                    person=person,
                    vehicle_id=vehicle.id,
                )
            )
    return entries


def search_index(entries: Iterable[DirectoryEntry], query: str | None) -> list[DirectoryEntry]:
    """
    Filter entries by case-insensitive substring match on the label.

    No ranking is applied; matches keep index order. A blank query
    returns every entry.
    """
    term = (query or "").strip().casefold()
    if not term:
        return list(entries)
    return [entry for entry in entries if term in entry.label.casefold()]


def select_entry(entry: DirectoryEntry) -> Selection:
    """
    Turn a picked entry into a registration selection.

    Picking a vehicle commits to that vehicle. Picking a person leaves the
    vehicle unset and asks for a secondary choice when the person has any.
    """
    if entry.kind == EntryKind.VEHICLE:
        return Selection(person=entry.person, vehicle=entry.vehicle)
    return Selection(
        person=entry.person,
        vehicle=None,
        needs_vehicle_choice=bool(entry.person.vehicles),
    )


def choose_vehicle(selection: Selection, vehicle_id: str) -> Selection:
    """
    Secondary selection step: commit to one of the person's vehicles.

    Raises:
        PreconditionError: If the vehicle is not owned by the selected person.
    """
    vehicle = selection.person.find_vehicle(vehicle_id)
    if vehicle is None:
        raise PreconditionError(
            f"vehicle {vehicle_id} does not belong to {selection.person.name}"
        )
    return Selection(person=selection.person, vehicle=vehicle)
