"""Domain layer package - business rules and core models."""

from condo_gate.domain.directory import (
    DirectoryEntry,
    EntryKind,
    Selection,
    build_index,
    choose_vehicle,
    search_index,
    select_entry,
)
from condo_gate.domain.exceptions import (
    DomainError,
    EntityNotFoundError,
    PreconditionError,
    ValidationError,
)
from condo_gate.domain.guard import (
    GuardAction,
    GuardDecision,
    SessionState,
    SessionStatus,
    authorize_navigation,
)
from condo_gate.domain.ledger import AccessLedger, EventFilter, filter_events, today_events
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

__all__ = [
    # Models
    "AccessEvent",
    "Direction",
    "House",
    "Person",
    "PersonSubtype",
    "PersonType",
    "Role",
    "User",
    "Vehicle",
    # Errors
    "DomainError",
    "EntityNotFoundError",
    "PreconditionError",
    "ValidationError",
    # Directory
    "DirectoryEntry",
    "EntryKind",
    "Selection",
    "build_index",
    "choose_vehicle",
    "search_index",
    "select_entry",
    # Ledger
    "AccessLedger",
    "EventFilter",
    "filter_events",
    "today_events",
    # Guard
    "GuardAction",
    "GuardDecision",
    "SessionState",
    "SessionStatus",
    "authorize_navigation",
]
