"""Infrastructure layer package."""

from condo_gate.infrastructure.memory import (
    DemoData,
    InMemoryEventStore,
    InMemoryHouseRepository,
    InMemoryPersonRepository,
    InMemoryUserRepository,
    build_demo_data,
)

__all__ = [
    "DemoData",
    "InMemoryEventStore",
    "InMemoryHouseRepository",
    "InMemoryPersonRepository",
    "InMemoryUserRepository",
    "build_demo_data",
]
