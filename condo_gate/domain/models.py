"""
Domain models for the condominium access-control system.

These are pure domain objects with no infrastructure dependencies.
They represent people, houses, vehicles, operator accounts and the
access events recorded at the gate.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class PersonType(str, Enum):
    """Standing of a person within the condominium."""

    RESIDENT = "Resident"
    AUTHORIZED = "Authorized"


class PersonSubtype(str, Enum):
    """Kind of authorized (non-resident) person."""

    EMPLOYEE = "Employee"
    VISITOR = "Visitor"


class Direction(str, Enum):
    """Direction of an access event at the gate."""

    ENTRY = "Entry"
    EXIT = "Exit"


class Role(str, Enum):
    """
    Operator role.

    GATEKEEPER: Registers and reviews access events.
    ADMINISTRATOR: Everything a gatekeeper does plus people/house management.
    """

    GATEKEEPER = "Gatekeeper"
    ADMINISTRATOR = "Administrator"


@dataclass
class Vehicle:
    """
    A vehicle owned by exactly one person.

    Attributes:
        id: Unique vehicle identifier.
        plate: Normalized plate (uppercase alphanumeric).
        model: Free-form model description.
        owner_id: Identifier of the owning person.
    """

    id: str
    plate: str
    model: str
    owner_id: str


@dataclass
class Person:
    """
    A resident or an authorized visitor/employee.

    Attributes:
        id: Unique person identifier.
        name: Full name.
        national_id: National identity document number.
        type: Resident or Authorized.
        subtype: Employee or Visitor for authorized people, None for residents.
        house_id: The one house this person belongs to.
        vehicles: Vehicles owned by this person, in stored order.
        created_at: When the record was created.
    """

    id: str
    name: str
    national_id: str
    type: PersonType
    house_id: str
    subtype: PersonSubtype | None = None
    vehicles: list[Vehicle] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    def find_vehicle(self, vehicle_id: str) -> Vehicle | None:
        """Return the owned vehicle with the given id, if any."""
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return vehicle
        return None


@dataclass
class House:
    """
    A house within the condominium.

    Attributes:
        id: Unique house identifier.
        street_type: Street kind, e.g. "Rua" or "Avenida".
        street_name: Street name.
        number: House number as written on the facade.
        residents: Ids of linked Resident people.
        authorized: Ids of linked Authorized people.
        created_at: When the record was created.
    """

    id: str
    street_type: str
    street_name: str
    number: str
    residents: list[str] = field(default_factory=list)
    authorized: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def address(self) -> str:
        """Printable address, e.g. "Rua das Flores, 10"."""
        return f"{self.street_type} {self.street_name}, {self.number}"

    @property
    def street(self) -> str:
        """Street descriptor without the number."""
        return f"{self.street_type} {self.street_name}"


@dataclass(frozen=True)
class AccessEvent:
    """
    An entry or exit registered at the gate.

    Name, address and plate are snapshots taken at registration time,
    so later edits to the person, house or vehicle never alter history.

    Attributes:
        id: Strictly increasing event identifier.
        person_id: Subject person.
        person_name: Person name at registration time.
        direction: Entry or Exit.
        timestamp: When the event was registered.
        house_id: House the person belonged to.
        house_address: House address at registration time.
        vehicle_id: Vehicle used, if any.
        vehicle_plate: Plate at registration time, if a vehicle was used.
    """

    id: int
    person_id: str
    person_name: str
    direction: Direction
    timestamp: datetime
    house_id: str
    house_address: str
    vehicle_id: str | None = None
    vehicle_plate: str | None = None


@dataclass
class User:
    """
    Operator account.

    The secret is opaque to the core and only compared by the
    authentication collaborator.
    """

    id: str
    national_id: str
    name: str
    role: Role
    secret: str = field(repr=False, default="")
