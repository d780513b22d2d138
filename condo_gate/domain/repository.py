"""
Repository interfaces the core depends on.

Concrete stores live in the infrastructure layer; tests and the default
runtime use the in-memory implementations.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from condo_gate.domain.models import AccessEvent, House, Person, User

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Keyed collection of entities with list/get/insert/update/delete.

    Implementations hand out copies, so callers mutate a record only by
    calling ``update`` with the edited copy.
    """

    entity_name: str = "entity"

    @abstractmethod
    def list(self) -> list[T]:
        """All entities in insertion order."""

    @abstractmethod
    def get(self, entity_id: str) -> T | None:
        """Entity by id, or None."""

    @abstractmethod
    def insert(self, entity: T) -> T:
        """Store a new entity. Raises KeyError on a duplicate id."""

    @abstractmethod
    def update(self, entity: T) -> T:
        """Replace an existing entity. Raises KeyError if it is unknown."""

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """Remove an entity. Returns False if it did not exist."""


class PersonRepository(Repository[Person]):
    entity_name = "person"


class HouseRepository(Repository[House]):
    entity_name = "house"


class UserRepository(Repository[User]):
    entity_name = "user"

    @abstractmethod
    def get_by_national_id(self, national_id: str) -> User | None:
        """Operator whose national id matches, ignoring punctuation."""


class EventStore(ABC):
    """
    Storage for access events.

    Only appending and listing are defined: the ledger has no update or
    delete path by construction.
    """

    @abstractmethod
    def append(self, event: AccessEvent) -> None:
        """Store an event as the most recent one."""

    @abstractmethod
    def list(self) -> list[AccessEvent]:
        """Return all events, most recent first."""
