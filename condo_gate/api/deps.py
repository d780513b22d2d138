"""
FastAPI dependencies for dependency injection.

Provides the service container, session restoration and the
authorization guard for route handlers.
"""

from collections.abc import Awaitable, Callable
from typing import Annotated
from urllib.parse import urlencode

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from condo_gate.application.access_registration import AccessRegistrationService
from condo_gate.application.administration import AdministrationService
from condo_gate.application.authentication import AuthenticationError, AuthenticationService
from condo_gate.application.container import ServiceContainer
from condo_gate.core.logging import bind_operator, get_logger
from condo_gate.domain.guard import GuardAction, SessionState, authorize_navigation
from condo_gate.domain.models import User
from condo_gate.domain.navigation import LOGIN_PATH, required_roles_for

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# OpenAPI note for endpoints behind guard(); redirect targets are client screens.
GUARD_RESPONSES: dict[int | str, dict] = {
    status.HTTP_303_SEE_OTHER: {
        "description": (
            "The operator may not open this screen. `Location` is a front-end "
            "navigation target (the login screen with `next`, or the role home), "
            "not an endpoint of this API."
        ),
    },
}


class NavigationRedirect(Exception):
    """
    Raised by the guard dependency when a request must go elsewhere.

    Turned into a ``303 See Other`` response by the application's
    exception handler. The ``Location`` names a front-end screen such as
    ``/login`` or ``/dashboard``; this service does not serve those paths.
    """

    def __init__(self, target: str, origin: str | None = None):
        super().__init__(target)
        self.target = target
        self.origin = origin

    @property
    def location(self) -> str:
        """Redirect URL; login redirects carry the origin as ``next``."""
        if self.target == LOGIN_PATH and self.origin:
            return f"{self.target}?{urlencode({'next': self.origin})}"
        return self.target


def get_container(request: Request) -> ServiceContainer:
    """
    Dependency to get the service container of the running app.

    Returns:
        ServiceContainer: Services built at startup.
    """
    return request.app.state.container


Container = Annotated[ServiceContainer, Depends(get_container)]


def get_auth_service(container: Container) -> AuthenticationService:
    return container.auth


def get_registration_service(container: Container) -> AccessRegistrationService:
    return container.registration


def get_administration_service(container: Container) -> AdministrationService:
    return container.administration


AuthSvc = Annotated[AuthenticationService, Depends(get_auth_service)]
RegistrationSvc = Annotated[AccessRegistrationService, Depends(get_registration_service)]
AdministrationSvc = Annotated[AdministrationService, Depends(get_administration_service)]


async def get_session_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Bearer token of the request, if any."""
    return credentials.credentials if credentials else None


SessionToken = Annotated[str | None, Depends(get_session_token)]


async def get_session_state(auth: AuthSvc, token: SessionToken) -> SessionState:
    """
    Restore the operator session before any guard decision.

    The restored operator is bound to the logging context of the request.
    """
    state = await auth.session_state(token)
    if state.user is not None:
        bind_operator(state.user.id, state.user.role.value)
    return state


Session = Annotated[SessionState, Depends(get_session_state)]


async def get_current_user(session: Session) -> User:
    """
    Signed-in operator, for endpoints outside the navigation table.

    Raises:
        AuthenticationError: If no session is open.
    """
    if session.user is None:
        raise AuthenticationError("authentication required")
    return session.user


CurrentUser = Annotated[User, Depends(get_current_user)]


def guard(path: str) -> Callable[[SessionState], Awaitable[User]]:
    """
    Build a dependency enforcing the navigation rule of ``path``.

    Args:
        path: Navigation path whose required roles protect the endpoint.

    Returns:
        Callable: Dependency resolving to the signed-in operator.

    Example:
        @router.get("/history")
        async def history(user: Annotated[User, Depends(guard("/access/history"))]):
            ...
    """
    required_roles = required_roles_for(path)

    async def dependency(session: Session) -> User:
        decision = authorize_navigation(session, required_roles, path)

        if decision.action == GuardAction.LOADING:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Session is still loading",
                headers={"Retry-After": "1"},
            )

        if decision.action == GuardAction.REDIRECT:
            logger.info(
                "navigation_redirect",
                path=path,
                target=decision.target,
                role=session.role.value if session.role else None,
            )
            raise NavigationRedirect(decision.target, decision.origin)

        return session.user

    return dependency
