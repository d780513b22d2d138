"""
Navigation API routes.

Expose the role menu and the guard decision for a path, so clients
render the same menu and redirects the server enforces.
"""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel

from condo_gate.api.deps import CurrentUser, Session
from condo_gate.domain.guard import GuardAction, GuardDecision, authorize_navigation
from condo_gate.domain.models import Role
from condo_gate.domain.navigation import MenuEntry, home_for, menu_for, required_roles_for

router = APIRouter(prefix="/navigation", tags=["navigation"])


class MenuItem(BaseModel):
    """One menu entry."""

    path: str
    label: str
    required_roles: list[Role]

    @classmethod
    def from_entry(cls, entry: MenuEntry) -> "MenuItem":
        return cls(
            path=entry.path,
            label=entry.label,
            required_roles=sorted(entry.required_roles, key=lambda role: role.value),
        )


class MenuResponse(BaseModel):
    """Menu of the signed-in operator's role."""

    role: Role
    home: str
    items: list[MenuItem]


class GuardDecisionResponse(BaseModel):
    """Guard outcome for a path."""

    path: str
    action: GuardAction
    target: str | None = None
    origin: str | None = None


@router.get(
    "/menu",
    response_model=MenuResponse,
    summary="Role menu",
)
async def get_menu(user: CurrentUser) -> MenuResponse:
    """Ordered navigation entries for the operator's role."""
    return MenuResponse(
        role=user.role,
        home=home_for(user.role),
        items=[MenuItem.from_entry(entry) for entry in menu_for(user.role)],
    )


@router.get(
    "/authorize",
    response_model=GuardDecisionResponse,
    summary="Check a navigation path",
    description="Evaluate the guard for a path without following the redirect.",
)
async def authorize(
    session: Session,
    path: Annotated[str, Query(min_length=1, max_length=512)],
) -> GuardDecisionResponse:
    required_roles = required_roles_for(path)
    if required_roles is None:
        # not a protected path
        decision = GuardDecision.render()
    else:
        decision = authorize_navigation(session, required_roles, path)
    return GuardDecisionResponse(
        path=path,
        action=decision.action,
        target=decision.target,
        origin=decision.origin,
    )
