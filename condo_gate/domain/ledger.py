"""
Access ledger: the append-only audit trail of gate events.

Events are created only by ``AccessLedger.register_event`` and are never
updated or deleted. Review screens and exports read projections built by
the pure ``today_events`` and ``filter_events`` functions.
"""

import itertools
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime, tzinfo

from condo_gate.domain.exceptions import PreconditionError, ValidationError
from condo_gate.domain.models import AccessEvent, Direction, House, Person, Vehicle
from condo_gate.domain.repository import EventStore
from condo_gate.domain.validation import format_house_address

ALL_DIRECTIONS = "all"


@dataclass(frozen=True)
class EventFilter:
    """
    Criteria for ledger projections. All provided criteria are ANDed.

    Attributes:
        free_text: Matches person name, vehicle plate or house address.
        direction: Entry/Exit, or None / "all" for any direction.
        on_date: Local calendar date the event must fall on.
    """

    free_text: str | None = None
    direction: Direction | str | None = None
    on_date: date | None = None


def _local_date(moment: datetime, tz: tzinfo | None) -> date:
    if tz is not None and moment.tzinfo is not None:
        return moment.astimezone(tz).date()
    return moment.date()


def _sort_most_recent_first(events: Iterable[AccessEvent]) -> list[AccessEvent]:
    # id breaks ties between events registered in the same tick
    return sorted(events, key=lambda event: (event.timestamp, event.id), reverse=True)


def _matches_text(event: AccessEvent, term: str) -> bool:
    lowered = term.casefold()
    if lowered in event.person_name.casefold():
        return True
    if event.vehicle_plate and term.upper() in event.vehicle_plate:
        return True
    return lowered in event.house_address.casefold()


def today_events(log: Iterable[AccessEvent], now: datetime) -> list[AccessEvent]:
    """
    Events whose local calendar date equals ``now``'s date.

    Args:
        log: Events to project.
        now: Reference moment; its timezone defines "local".

    Returns:
        list: Matching events, most recent first.
    """
    today = now.date()
    return _sort_most_recent_first(
        event for event in log if _local_date(event.timestamp, now.tzinfo) == today
    )


def filter_events(
    log: Iterable[AccessEvent],
    criteria: EventFilter,
    tz: tzinfo | None = None,
) -> list[AccessEvent]:
    """
    Filter and sort events for the history view and exports.

    Args:
        log: Events to project.
        criteria: Filter criteria; empty criteria keep every event.
        tz: Timezone used to compute calendar dates of aware timestamps.

    Returns:
        list: Matching events, most recent first. Empty when nothing matches.
    """
    term = (criteria.free_text or "").strip()
    direction = criteria.direction
    if direction == ALL_DIRECTIONS:
        direction = None

    def matches(event: AccessEvent) -> bool:
        if term and not _matches_text(event, term):
            return False
        if direction is not None and event.direction != direction:
            return False
        on_date = criteria.on_date
        if on_date is not None and _local_date(event.timestamp, tz) != on_date:
            return False
        return True

    return _sort_most_recent_first(event for event in log if matches(event))


class AccessLedger:
    """
    Append-only log of entry/exit events.

    Example:
        ledger = AccessLedger(InMemoryEventStore())
        event = ledger.register_event(person, None, Direction.ENTRY, house)
    """

    def __init__(
        self,
        store: EventStore,
        clock: Callable[[], datetime] | None = None,
        tz: tzinfo | None = None,
    ):
        """
        Initialize the ledger.

        Args:
            store: Backing event store.
            clock: Source of registration timestamps.
            tz: Local timezone for calendar-date projections.
        """
        self._store = store
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(tz))
        self._lock = threading.Lock()
        last_id = max((event.id for event in store.list()), default=0)
        self._sequence = itertools.count(last_id + 1)

    @property
    def events(self) -> tuple[AccessEvent, ...]:
        """Snapshot of the log, most recent first."""
        return tuple(self._store.list())

    def __len__(self) -> int:
        return len(self._store.list())

    def now(self) -> datetime:
        return self._clock()

    def register_event(
        self,
        person: Person | None,
        vehicle: Vehicle | None,
        direction: Direction | str,
        house: House | None,
    ) -> AccessEvent:
        """
        Register an entry or exit.

        Name, address and plate are copied into the event so later edits
        never change it. Consecutive events in the same direction are
        accepted; operators correct mistakes by registering the opposite one.

        Args:
            person: Subject person; required.
            vehicle: Vehicle used, must belong to the person.
            direction: Entry or Exit.
            house: The person's house.

        Returns:
            AccessEvent: The stored event.

        Raises:
            PreconditionError: If no person is selected, the house is missing
                or the vehicle is not the person's.
            ValidationError: If the direction is unknown.
        """
        if person is None:
            raise PreconditionError("select a person first")
        if house is None:
            raise PreconditionError(f"house not found for {person.name}")
        if vehicle is not None and person.find_vehicle(vehicle.id) is None:
            raise PreconditionError(
                f"vehicle {vehicle.plate} does not belong to {person.name}"
            )
        try:
            direction = Direction(direction)
        except ValueError:
            raise ValidationError(
                f"direction must be Entry or Exit, got {direction!r}",
                invariant="direction",
            ) from None

        with self._lock:
            event = AccessEvent(
                id=next(self._sequence),
                person_id=person.id,
                person_name=person.name,
                direction=direction,
                timestamp=self._clock(),
                house_id=house.id,
                house_address=format_house_address(house),
                vehicle_id=vehicle.id if vehicle else None,
                vehicle_plate=vehicle.plate if vehicle else None,
            )
            self._store.append(event)

        return event

    def today(self, now: datetime | None = None) -> list[AccessEvent]:
        """Today's events, most recent first."""
        return today_events(self._store.list(), now or self._clock())

    def filter(self, criteria: EventFilter | None = None) -> list[AccessEvent]:
        """Filtered history, most recent first."""
        return filter_events(self._store.list(), criteria or EventFilter(), self._tz)
