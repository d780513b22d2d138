"""
Dashboard API routes.

Counters and quick actions for the landing page of each role.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from condo_gate.api.deps import GUARD_RESPONSES, RegistrationSvc, guard
from condo_gate.api.routes.navigation import MenuItem
from condo_gate.domain.models import Role, User
from condo_gate.domain.navigation import ADMIN_DASHBOARD, DASHBOARD

router = APIRouter(tags=["dashboard"], responses=GUARD_RESPONSES)


class DashboardResponse(BaseModel):
    """Dashboard counters for today."""

    operator: str
    role: Role
    residents: int
    houses: int
    accesses_today: int
    entries_today: int
    exits_today: int
    quick_actions: list[MenuItem]


def _dashboard(user: User, registration) -> DashboardResponse:
    summary = registration.dashboard_summary(user.role)
    return DashboardResponse(
        operator=user.name,
        role=user.role,
        residents=summary.residents,
        houses=summary.houses,
        accesses_today=summary.accesses_today,
        entries_today=summary.entries_today,
        exits_today=summary.exits_today,
        quick_actions=[MenuItem.from_entry(entry) for entry in summary.quick_actions],
    )


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Operator dashboard",
)
async def get_dashboard(
    user: Annotated[User, Depends(guard(DASHBOARD.path))],
    registration: RegistrationSvc,
) -> DashboardResponse:
    return _dashboard(user, registration)


@router.get(
    "/admin/dashboard",
    response_model=DashboardResponse,
    summary="Administrator dashboard",
)
async def get_admin_dashboard(
    user: Annotated[User, Depends(guard(ADMIN_DASHBOARD.path))],
    registration: RegistrationSvc,
) -> DashboardResponse:
    """Same counters as the operator dashboard, administrator shortcuts."""
    return _dashboard(user, registration)
