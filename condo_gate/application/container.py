"""
Service wiring.

Builds repositories, the ledger and the use-case services once per
application instance. The FastAPI app keeps the container on
``app.state`` and route dependencies read from it.
"""

from dataclasses import dataclass

from condo_gate.application.access_registration import AccessRegistrationService
from condo_gate.application.administration import AdministrationService
from condo_gate.application.authentication import AuthenticationService
from condo_gate.core.config import Settings, get_settings
from condo_gate.core.logging import get_logger
from condo_gate.domain.ledger import AccessLedger
from condo_gate.infrastructure.memory import (
    InMemoryEventStore,
    InMemoryHouseRepository,
    InMemoryPersonRepository,
    InMemoryUserRepository,
    build_demo_data,
)

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Everything a request handler may need."""

    settings: Settings
    users: InMemoryUserRepository
    people: InMemoryPersonRepository
    houses: InMemoryHouseRepository
    ledger: AccessLedger
    auth: AuthenticationService
    registration: AccessRegistrationService
    administration: AdministrationService


def build_container(
    settings: Settings | None = None,
    seed: bool | None = None,
) -> ServiceContainer:
    """
    Create the in-memory stores and services.

    Args:
        settings: Application settings. Defaults to the cached settings.
        seed: Load demo records. Defaults to ``settings.seed_demo_data``.

    Returns:
        ServiceContainer: Wired services sharing one set of stores.
    """
    settings = settings or get_settings()
    if seed is None:
        seed = settings.seed_demo_data
    tz = settings.tzinfo

    if seed:
        data = build_demo_data(tz)
        users = InMemoryUserRepository(data.users)
        people = InMemoryPersonRepository(data.people)
        houses = InMemoryHouseRepository(data.houses)
        events = InMemoryEventStore(data.events)
    else:
        users = InMemoryUserRepository()
        people = InMemoryPersonRepository()
        houses = InMemoryHouseRepository()
        events = InMemoryEventStore()

    ledger = AccessLedger(events, tz=tz)

    logger.info(
        "container_built",
        seeded=seed,
        users=len(users),
        people=len(people),
        houses=len(houses),
        events=len(ledger),
    )

    return ServiceContainer(
        settings=settings,
        users=users,
        people=people,
        houses=houses,
        ledger=ledger,
        auth=AuthenticationService(users, settings.session_token_bytes),
        registration=AccessRegistrationService(people, houses, ledger),
        administration=AdministrationService(people, houses),
    )
