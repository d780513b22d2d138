"""
Demo records loaded at startup when ``seed_demo_data`` is enabled.

Two operator accounts, four houses, ten people and a short access
history, enough to exercise every screen of the gate console.
"""

from dataclasses import dataclass
from datetime import datetime, tzinfo

from condo_gate.domain.models import (
    AccessEvent,
    Direction,
    House,
    Person,
    PersonSubtype,
    PersonType,
    Role,
    User,
    Vehicle,
)


@dataclass
class DemoData:
    """Seed collections, one per repository."""

    users: list[User]
    houses: list[House]
    people: list[Person]
    events: list[AccessEvent]


_VEHICLES = [
    Vehicle(id="1", plate="ABC1234", model="Honda Civic", owner_id="1"),
    Vehicle(id="2", plate="DEF5678", model="Toyota Corolla", owner_id="2"),
    Vehicle(id="3", plate="GHI9012", model="Volkswagen Gol", owner_id="4"),
    Vehicle(id="4", plate="JKL3456", model="Ford Ka", owner_id="5"),
    Vehicle(id="5", plate="MNO7890", model="Chevrolet Onix", owner_id="7"),
    Vehicle(id="6", plate="PQR1357", model="Fiat Uno", owner_id="3"),
    Vehicle(id="7", plate="STU2468", model="Hyundai HB20", owner_id="9"),
]

# id, name, national id, type, subtype, house id, created
_PEOPLE = [
    ("1", "Carlos Silva", "111.222.333-44", PersonType.RESIDENT, None, "1", "2024-01-15"),
    ("2", "Ana Santos", "555.666.777-88", PersonType.RESIDENT, None, "1", "2024-01-15"),
    ("3", "José da Limpeza", "999.888.777-66", PersonType.AUTHORIZED, PersonSubtype.EMPLOYEE, "1", "2024-01-20"),
    ("4", "Roberto Oliveira", "444.333.222-11", PersonType.RESIDENT, None, "2", "2024-01-20"),
    ("5", "Fernanda Lima", "777.555.333-99", PersonType.AUTHORIZED, PersonSubtype.VISITOR, "2", "2024-01-25"),
    ("6", "Pedro Jardineiro", "222.444.666-88", PersonType.AUTHORIZED, PersonSubtype.EMPLOYEE, "2", "2024-02-01"),
    ("7", "Lucia Costa", "888.999.111-22", PersonType.RESIDENT, None, "3", "2024-02-01"),
    ("8", "Miguel Costa", "333.111.999-77", PersonType.RESIDENT, None, "3", "2024-02-01"),
    ("9", "Patrícia Souza", "666.888.444-55", PersonType.RESIDENT, None, "4", "2024-02-10"),
    ("10", "Bruno Visitante", "111.333.555-77", PersonType.AUTHORIZED, PersonSubtype.VISITOR, "4", "2024-02-15"),
]

# id, street type, street name, number, residents, authorized, created
_HOUSES = [
    ("1", "Rua", "das Flores", "10", ["1", "2"], ["3"], "2024-01-15"),
    ("2", "Avenida", "Principal", "25", ["4"], ["5", "6"], "2024-01-20"),
    ("3", "Rua", "dos Ipês", "42", ["7", "8"], [], "2024-02-01"),
    ("4", "Rua", "das Acácias", "15", ["9"], ["10"], "2024-02-10"),
]

# id, person id, vehicle id, direction, local time
_EVENTS = [
    (1, "1", "1", Direction.ENTRY, "2024-07-17T08:30:00"),
    (2, "4", "3", Direction.ENTRY, "2024-07-17T09:15:00"),
    (3, "3", None, Direction.ENTRY, "2024-07-17T10:00:00"),
    (4, "1", "1", Direction.EXIT, "2024-07-17T12:30:00"),
    (5, "7", "5", Direction.ENTRY, "2024-07-17T14:20:00"),
]


def _local(value: str, tz: tzinfo | None) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=tz)


def build_demo_data(tz: tzinfo | None = None) -> DemoData:
    """
    Build a fresh copy of the demo records.

    Args:
        tz: Timezone attached to seeded timestamps.

    Returns:
        DemoData: Users, houses, people and historical events.
    """
    users = [
        User(id="1", national_id="123.456.789-00", name="João Porteiro",
             role=Role.GATEKEEPER, secret="123456"),
        User(id="2", national_id="987.654.321-00", name="Maria Admin",
             role=Role.ADMINISTRATOR, secret="admin123"),
    ]

    houses = [
        House(
            id=house_id,
            street_type=street_type,
            street_name=street_name,
            number=number,
            residents=list(residents),
            authorized=list(authorized),
            created_at=_local(created, tz),
        )
        for house_id, street_type, street_name, number, residents, authorized, created in _HOUSES
    ]

    people = [
        Person(
            id=person_id,
            name=name,
            national_id=national_id,
            type=person_type,
            subtype=subtype,
            house_id=house_id,
            vehicles=[
                Vehicle(v.id, v.plate, v.model, v.owner_id)
                for v in _VEHICLES
                if v.owner_id == person_id
            ],
            created_at=_local(created, tz),
        )
        for person_id, name, national_id, person_type, subtype, house_id, created in _PEOPLE
    ]

    people_by_id = {person.id: person for person in people}
    houses_by_id = {house.id: house for house in houses}
    events = []
    for event_id, person_id, vehicle_id, direction, moment in _EVENTS:
        person = people_by_id[person_id]
        house = houses_by_id[person.house_id]
        vehicle = person.find_vehicle(vehicle_id) if vehicle_id else None
        events.append(
            AccessEvent(
                id=event_id,
                person_id=person.id,
                person_name=person.name,
                direction=direction,
                timestamp=_local(moment, tz),
                house_id=house.id,
                house_address=house.address,
                vehicle_id=vehicle.id if vehicle else None,
                vehicle_plate=vehicle.plate if vehicle else None,
            )
        )

    return DemoData(users=users, houses=houses, people=people, events=events)
