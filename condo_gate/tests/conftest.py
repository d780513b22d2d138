"""
Pytest configuration and fixtures.

Provides shared fixtures for testing including:
- Settings and a seeded service container
- Sample people, houses and a ledger with a controllable clock
- Test client and signed-in operator headers
"""

from collections.abc import Iterator
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from condo_gate.application.container import ServiceContainer, build_container
from condo_gate.core.config import Settings
from condo_gate.domain.ledger import AccessLedger
from condo_gate.domain.models import House, Person, PersonSubtype, PersonType, Vehicle
from condo_gate.infrastructure.memory import InMemoryEventStore

SAO_PAULO = ZoneInfo("America/Sao_Paulo")

GATEKEEPER_CREDENTIALS = {"national_id": "123.456.789-00", "secret": "123456"}
ADMIN_CREDENTIALS = {"national_id": "987.654.321-00", "secret": "admin123"}


class FakeClock:
    """Clock returning a fixed moment."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment's .env file."""
    return Settings(
        _env_file=None,
        timezone="America/Sao_Paulo",
        log_format="text",
        log_level="WARNING",
        seed_demo_data=True,
    )


@pytest.fixture
def container(settings: Settings) -> ServiceContainer:
    """Services over freshly seeded demo data."""
    return build_container(settings, seed=True)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 7, 17, 15, 0, tzinfo=SAO_PAULO))


@pytest.fixture
def ledger(clock: FakeClock) -> AccessLedger:
    """Empty ledger driven by the fake clock."""
    return AccessLedger(InMemoryEventStore(), clock=clock, tz=SAO_PAULO)


@pytest.fixture
def house() -> House:
    return House(
        id="h1",
        street_type="Rua",
        street_name="das Flores",
        number="10",
        residents=["p1"],
        authorized=["p2"],
    )


@pytest.fixture
def resident() -> Person:
    """Resident with two vehicles."""
    return Person(
        id="p1",
        name="Carlos Silva",
        national_id="111.222.333-44",
        type=PersonType.RESIDENT,
        house_id="h1",
        vehicles=[
            Vehicle(id="v1", plate="ABC1234", model="Honda Civic", owner_id="p1"),
            Vehicle(id="v2", plate="XYZ9876", model="Fiat Uno", owner_id="p1"),
        ],
    )


@pytest.fixture
def employee() -> Person:
    """Authorized employee without vehicles."""
    return Person(
        id="p2",
        name="José da Limpeza",
        national_id="999.888.777-66",
        type=PersonType.AUTHORIZED,
        subtype=PersonSubtype.EMPLOYEE,
        house_id="h1",
    )


@pytest.fixture
def client(settings: Settings, container: ServiceContainer) -> Iterator[TestClient]:
    """Test client over the seeded container."""
    from condo_gate.main import create_app

    app = create_app(settings, container)
    with TestClient(app) as test_client:
        yield test_client


def _login(client: TestClient, credentials: dict) -> dict[str, str]:
    response = client.post("/api/v1/auth/login", json=credentials)
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def gatekeeper_headers(client: TestClient) -> dict[str, str]:
    return _login(client, GATEKEEPER_CREDENTIALS)


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    return _login(client, ADMIN_CREDENTIALS)
