"""
Access registration use case.

Resolves who is passing through the gate via the directory index,
appends the event to the access ledger and serves the review
projections (today's list, filtered history, dashboard counters).
"""

from dataclasses import dataclass, field

from condo_gate.core.logging import get_logger
from condo_gate.domain.directory import (
    DirectoryEntry,
    Selection,
    build_index,
    choose_vehicle,
    search_index,
    select_entry,
)
from condo_gate.domain.exceptions import DomainError, EntityNotFoundError
from condo_gate.domain.ledger import AccessLedger, EventFilter
from condo_gate.domain.models import AccessEvent, Direction, PersonType, Role
from condo_gate.domain.navigation import QUICK_ACTIONS, MenuEntry
from condo_gate.domain.repository import HouseRepository, PersonRepository

logger = get_logger(__name__)


@dataclass
class DashboardSummary:
    """Counters and shortcuts shown on an operator's dashboard."""

    residents: int
    houses: int
    accesses_today: int
    entries_today: int
    exits_today: int
    quick_actions: list[MenuEntry] = field(default_factory=list)


class AccessRegistrationService:
    """
    Gatekeeper workflow over the directory and the ledger.

    Example:
        service = AccessRegistrationService(people, houses, ledger)
        entries = service.search("abc1")
        event = service.register("1", Direction.ENTRY, vehicle_id="1")
    """

    def __init__(
        self,
        people: PersonRepository,
        houses: HouseRepository,
        ledger: AccessLedger,
    ):
        self._people = people
        self._houses = houses
        self._ledger = ledger

    @property
    def ledger(self) -> AccessLedger:
        return self._ledger

    def directory(self) -> list[DirectoryEntry]:
        """Current directory, rebuilt from the person repository."""
        return build_index(self._people.list())

    def search(self, query: str | None) -> list[DirectoryEntry]:
        return search_index(self.directory(), query)

    def select(self, key: str, vehicle_id: str | None = None) -> Selection:
        """
        Resolve a directory key into a selection.

        Args:
            key: Directory entry key, e.g. ``person-1`` or ``vehicle-3``.
            vehicle_id: Optional secondary choice for person entries.

        Raises:
            EntityNotFoundError: If no entry has the key.
            PreconditionError: If ``vehicle_id`` is not owned by the person.
        """
        for entry in self.directory():
            if entry.key == key:
                selection = select_entry(entry)
                if vehicle_id and selection.vehicle is None:
                    selection = choose_vehicle(selection, vehicle_id)
                return selection
        raise EntityNotFoundError("directory entry", key)

    def register(
        self,
        person_id: str | None,
        direction: Direction | str,
        vehicle_id: str | None = None,
    ) -> AccessEvent:
        """
        Register an entry or exit for a person.

        Args:
            person_id: Selected person; None means nothing was selected.
            direction: Entry or Exit.
            vehicle_id: Vehicle used, must belong to the person.

        Returns:
            AccessEvent: The stored event.

        Raises:
            PreconditionError: If no person is selected or the vehicle is
                not the person's.
            EntityNotFoundError: If the person id is unknown.
            ValidationError: If the direction is unknown.
        """
        try:
            person = None
            if person_id:
                person = self._people.get(person_id)
                if person is None:
                    raise EntityNotFoundError("person", person_id)
            selection = Selection(person=person) if person else None
            if selection is not None and vehicle_id:
                selection = choose_vehicle(selection, vehicle_id)
            house = self._houses.get(person.house_id) if person else None

            event = self._ledger.register_event(
                person,
                selection.vehicle if selection else None,
                direction,
                house,
            )
        except DomainError as exc:
            logger.warning(
                "registration_rejected",
                person_id=person_id,
                vehicle_id=vehicle_id,
                direction=str(direction),
                reason=str(exc),
            )
            raise

        logger.info(
            "access_registered",
            event_id=event.id,
            person_id=event.person_id,
            direction=event.direction.value,
            plate=event.vehicle_plate,
        )
        return event

    def register_selection(self, selection: Selection, direction: Direction | str) -> AccessEvent:
        """Register an event for a resolved directory selection."""
        return self.register(
            selection.person.id,
            direction,
            vehicle_id=selection.vehicle.id if selection.vehicle else None,
        )

    def today(self) -> list[AccessEvent]:
        return self._ledger.today()

    def history(self, criteria: EventFilter | None = None) -> list[AccessEvent]:
        return self._ledger.filter(criteria)

    def dashboard_summary(self, role: Role) -> DashboardSummary:
        """
        Counters for the dashboard of an operator role.

        Args:
            role: Role of the signed-in operator; selects quick actions.

        Returns:
            DashboardSummary: Resident/house counts and today's traffic.
        """
        today = self._ledger.today()
        return DashboardSummary(
            residents=sum(
                1 for person in self._people.list() if person.type == PersonType.RESIDENT
            ),
            houses=len(self._houses.list()),
            accesses_today=len(today),
            entries_today=sum(1 for event in today if event.direction == Direction.ENTRY),
            exits_today=sum(1 for event in today if event.direction == Direction.EXIT),
            quick_actions=list(QUICK_ACTIONS.get(role, ())),
        )
