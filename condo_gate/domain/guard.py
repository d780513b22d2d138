"""
Authorization guard for navigation requests.

A pure decision function: given the session state, the roles a route
requires and the requested path, it says whether to render, redirect or
keep waiting for the session to load. It never mutates the session and
never raises; a role mismatch is a redirect, not an error.
"""

from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum

from condo_gate.domain.models import Role, User
from condo_gate.domain.navigation import LOGIN_PATH, ROLE_HOME


class SessionStatus(str, Enum):
    """Resolution state of the operator session."""

    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of the session as seen by the guard.

    Attributes:
        status: Whether the session is still loading, absent or present.
        user: Active operator when authenticated.
    """

    status: SessionStatus
    user: User | None = None

    @classmethod
    def loading(cls) -> "SessionState":
        return cls(SessionStatus.LOADING)

    @classmethod
    def anonymous(cls) -> "SessionState":
        return cls(SessionStatus.UNAUTHENTICATED)

    @classmethod
    def authenticated(cls, user: User) -> "SessionState":
        return cls(SessionStatus.AUTHENTICATED, user)

    @property
    def role(self) -> Role | None:
        return self.user.role if self.user else None


class GuardAction(str, Enum):
    """Outcome of a guard decision."""

    RENDER = "render"
    REDIRECT = "redirect"
    LOADING = "loading"


@dataclass(frozen=True)
class GuardDecision:
    """
    Result of ``authorize_navigation``.

    Attributes:
        action: Render, redirect or loading.
        target: Redirect destination, for redirects only.
        origin: Originally requested path, captured on login redirects so
            the login flow can resume there.
    """

    action: GuardAction
    target: str | None = None
    origin: str | None = None

    @classmethod
    def render(cls) -> "GuardDecision":
        return cls(GuardAction.RENDER)

    @classmethod
    def redirect(cls, target: str, origin: str | None = None) -> "GuardDecision":
        return cls(GuardAction.REDIRECT, target=target, origin=origin)

    @property
    def allowed(self) -> bool:
        return self.action == GuardAction.RENDER


def authorize_navigation(
    session: SessionState,
    required_roles: Collection[Role] | None,
    path: str,
) -> GuardDecision:
    """
    Decide what happens to a navigation request.

    Args:
        session: Current session state.
        required_roles: Roles allowed on the route; empty or None allows
            any signed-in operator.
        path: Requested path, captured when redirecting to login.

    Returns:
        GuardDecision: render, redirect(target) or loading.

    Example:
        >>> authorize_navigation(SessionState.anonymous(), None, "/dashboard").target
        '/login'
    """
    if session.status == SessionStatus.LOADING:
        return GuardDecision(GuardAction.LOADING)

    user = session.user
    if session.status == SessionStatus.UNAUTHENTICATED or user is None:
        return GuardDecision.redirect(LOGIN_PATH, origin=path)

    if not required_roles or user.role in required_roles:
        return GuardDecision.render()

    return GuardDecision.redirect(ROLE_HOME[user.role])
