"""In-memory storage package."""

from condo_gate.infrastructure.memory.repository import (
    InMemoryEventStore,
    InMemoryHouseRepository,
    InMemoryPersonRepository,
    InMemoryUserRepository,
)
from condo_gate.infrastructure.memory.seed import DemoData, build_demo_data

__all__ = [
    # Repositories
    "InMemoryEventStore",
    "InMemoryHouseRepository",
    "InMemoryPersonRepository",
    "InMemoryUserRepository",
    # Seed
    "DemoData",
    "build_demo_data",
]
