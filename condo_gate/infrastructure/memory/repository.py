"""
In-memory repository implementations.

Entities are kept in insertion-ordered dicts keyed by id and copied on
the way in and out, so no caller can alter stored state except through
``update``. Everything lives for the lifetime of the process.
"""

import copy
import threading
from typing import Generic, TypeVar

from condo_gate.domain.models import AccessEvent, House, Person, User
from condo_gate.domain.repository import (
    EventStore,
    HouseRepository,
    PersonRepository,
    UserRepository,
)
from condo_gate.domain.validation import normalize_national_id

T = TypeVar("T")


class _InMemoryStore(Generic[T]):
    """Dict-backed implementation shared by the entity repositories."""

    entity_name = "entity"

    def __init__(self, entities: list[T] | None = None):
        self._items: dict[str, T] = {}
        for entity in entities or []:
            self.insert(entity)

    def list(self) -> list[T]:
        return [copy.deepcopy(entity) for entity in self._items.values()]

    def get(self, entity_id: str) -> T | None:
        entity = self._items.get(entity_id)
        return copy.deepcopy(entity) if entity is not None else None

    def insert(self, entity: T) -> T:
        entity_id = entity.id
        if entity_id in self._items:
            raise KeyError(f"{self.entity_name} already exists: {entity_id}")
        self._items[entity_id] = copy.deepcopy(entity)
        return copy.deepcopy(entity)

    def update(self, entity: T) -> T:
        entity_id = entity.id
        if entity_id not in self._items:
            raise KeyError(f"{self.entity_name} not found: {entity_id}")
        self._items[entity_id] = copy.deepcopy(entity)
        return copy.deepcopy(entity)

    def delete(self, entity_id: str) -> bool:
        return self._items.pop(entity_id, None) is not None

    def __len__(self) -> int:
        return len(self._items)


class InMemoryPersonRepository(_InMemoryStore[Person], PersonRepository):
    entity_name = "person"


class InMemoryHouseRepository(_InMemoryStore[House], HouseRepository):
    entity_name = "house"


class InMemoryUserRepository(_InMemoryStore[User], UserRepository):
    entity_name = "user"

    def get_by_national_id(self, national_id: str) -> User | None:
        wanted = normalize_national_id(national_id)
        if not wanted:
            return None
        for user in self._items.values():
            if normalize_national_id(user.national_id) == wanted:
                return copy.deepcopy(user)
        return None


class InMemoryEventStore(EventStore):
    """
    Append-only event list, most recent first.

    Events are frozen dataclasses, so they are shared rather than copied.
    """

    def __init__(self, events: list[AccessEvent] | None = None):
        self._events: list[AccessEvent] = []
        self._lock = threading.Lock()
        # seed oldest first so the newest ends up at the front
        for event in sorted(events or [], key=lambda item: (item.timestamp, item.id)):
            self.append(event)

    def append(self, event: AccessEvent) -> None:
        with self._lock:
            self._events.insert(0, event)

    def list(self) -> list[AccessEvent]:
        with self._lock:
            return list(self._events)
