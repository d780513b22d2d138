"""
Domain invariants for people, houses and vehicles.

Predicates are pure and side-effect free. The ``check_*`` helpers
raise ValidationError naming the violated invariant; any consumer that
creates or edits a record must run them before persisting it.
"""

import re
from collections.abc import Mapping

from condo_gate.domain.exceptions import ValidationError
from condo_gate.domain.models import House, Person, PersonType, Vehicle

PLATE_PATTERN = re.compile(r"^[A-Z0-9]{4,10}$")


def normalize_plate(text: str) -> str:
    """
    Normalize free-form plate text.

    Uppercases and drops anything that is not a letter or digit.

    Example:
        >>> normalize_plate("abc-1234")
        'ABC1234'
    """
    if not text:
        return ""
    return re.sub(r"[^A-Z0-9]", "", text.upper())


def normalize_national_id(text: str) -> str:
    """Keep only the digits of a national id, e.g. "123.456.789-00" -> "12345678900"."""
    return re.sub(r"\D", "", text or "")


def format_house_address(house: House) -> str:
    """Render ``"{streetType} {streetName}, {number}"``."""
    return house.address


def is_resident_linkable(person: Person) -> bool:
    """Check a person may be listed in a house's residents."""
    return person.type == PersonType.RESIDENT and person.subtype is None


def is_authorized_linkable(person: Person) -> bool:
    """Check a person may be listed in a house's authorized set."""
    return person.type == PersonType.AUTHORIZED and person.subtype is not None


def is_house_deletable(house: House) -> bool:
    """A house can only be removed once nobody is linked to it."""
    return not house.residents and not house.authorized


def vehicle_plate_unique(
    person: Person,
    plate: str,
    exclude_vehicle_id: str | None = None,
) -> bool:
    """
    Check a plate is not already registered in the person's fleet.

    Args:
        person: Owner whose fleet is inspected.
        plate: Candidate plate, normalized before comparison.
        exclude_vehicle_id: Vehicle being edited, ignored in the comparison.

    Returns:
        bool: True if no other vehicle of the person carries the plate.
    """
    candidate = normalize_plate(plate)
    return all(
        normalize_plate(vehicle.plate) != candidate
        for vehicle in person.vehicles
        if vehicle.id != exclude_vehicle_id
    )


def check_vehicle(vehicle: Vehicle) -> None:
    if not PLATE_PATTERN.match(vehicle.plate):
        raise ValidationError(
            f"plate must be 4-10 uppercase letters or digits: {vehicle.plate!r}",
            invariant="plate_format",
        )
    if not vehicle.owner_id:
        raise ValidationError("vehicle must have an owner", invariant="vehicle_owner")


def check_person(person: Person) -> None:
    """
    Validate a person record on its own.

    Raises:
        ValidationError: On the first violated invariant.
    """
    if not person.name.strip():
        raise ValidationError("name is required", invariant="name_required")
    if not person.national_id.strip():
        raise ValidationError("national id is required", invariant="national_id_required")
    if not person.house_id:
        raise ValidationError("person must belong to a house", invariant="house_required")

    if person.type == PersonType.AUTHORIZED and person.subtype is None:
        raise ValidationError(
            "subtype required for Authorized person",
            invariant="subtype_required",
        )
    if person.type == PersonType.RESIDENT and person.subtype is not None:
        raise ValidationError(
            "subtype must be empty for Resident person",
            invariant="subtype_forbidden",
        )

    seen: set[str] = set()
    vehicle_ids: set[str] = set()
    for vehicle in person.vehicles:
        check_vehicle(vehicle)
        if vehicle.id in vehicle_ids:
            raise ValidationError(
                f"vehicle listed twice: {vehicle.id}",
                invariant="vehicle_id_unique",
            )
        vehicle_ids.add(vehicle.id)
        if vehicle.owner_id != person.id:
            raise ValidationError(
                f"vehicle {vehicle.plate} is owned by another person",
                invariant="vehicle_owner",
            )
        if vehicle.plate in seen:
            raise ValidationError(
                f"plate already registered for this person: {vehicle.plate}",
                invariant="plate_unique",
            )
        seen.add(vehicle.plate)


def check_house(house: House) -> None:
    if not house.street_type.strip() or not house.street_name.strip():
        raise ValidationError("street is required", invariant="street_required")
    if not house.number.strip():
        raise ValidationError("house number is required", invariant="number_required")
    overlap = set(house.residents) & set(house.authorized)
    if overlap:
        raise ValidationError(
            f"person linked as both resident and authorized: {sorted(overlap)}",
            invariant="links_disjoint",
        )


def check_house_links(house: House, people: Mapping[str, Person]) -> None:
    """
    Validate that every linked person exists and has the matching type.

    Args:
        house: House whose links are checked.
        people: Known people keyed by id.
    """
    check_house(house)
    for person_id in house.residents:
        person = people.get(person_id)
        if person is None or not is_resident_linkable(person):
            raise ValidationError(
                f"person {person_id} cannot be linked as resident",
                invariant="resident_type",
            )
    for person_id in house.authorized:
        person = people.get(person_id)
        if person is None or not is_authorized_linkable(person):
            raise ValidationError(
                f"person {person_id} cannot be linked as authorized",
                invariant="authorized_type",
            )


def check_house_deletable(house: House) -> None:
    if not is_house_deletable(house):
        raise ValidationError("house has dependents", invariant="house_has_dependents")
