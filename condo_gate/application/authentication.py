"""
Authentication service for gate operators.

Resolves operators by national id, issues opaque session tokens and
restores sessions for the authorization guard. Sessions live in memory
for the lifetime of the process.
"""

import threading
from dataclasses import dataclass

from condo_gate.core.logging import get_logger
from condo_gate.core.security import generate_session_token, is_safe_local_path, secrets_match
from condo_gate.domain.exceptions import DomainError
from condo_gate.domain.guard import SessionState
from condo_gate.domain.models import User
from condo_gate.domain.navigation import home_for
from condo_gate.domain.repository import UserRepository

logger = get_logger(__name__)


class AuthenticationError(DomainError):
    """Credentials were rejected or a session token is unknown."""


@dataclass(frozen=True)
class AuthenticatedSession:
    """A signed-in operator and the token identifying the session."""

    token: str
    user: User


class AuthenticationService:
    """
    In-memory operator sessions.

    Example:
        service = AuthenticationService(users)
        session = service.login("123.456.789-00", "123456")
        user = await service.restore(session.token)
    """

    def __init__(self, users: UserRepository, token_bytes: int | None = None):
        """
        Initialize the service.

        Args:
            users: Operator accounts.
            token_bytes: Session token entropy; defaults to settings.
        """
        self._users = users
        self._token_bytes = token_bytes
        self._sessions: dict[str, str] = {}
        self._lock = threading.Lock()

    def login(self, national_id: str, secret: str) -> AuthenticatedSession:
        """
        Verify credentials and open a session.

        The national id is compared on its digits only, so formatted and
        bare inputs identify the same operator.

        Args:
            national_id: Operator national id, formatted or not.
            secret: Operator secret.

        Returns:
            AuthenticatedSession: The new session.

        Raises:
            AuthenticationError: If the operator is unknown or the secret
                does not match.
        """
        user = self._users.get_by_national_id(national_id)
        if user is None or not secrets_match(secret or "", user.secret):
            logger.warning(
                "login_failed",
                national_id=national_id,
                reason="invalid_credentials",
            )
            raise AuthenticationError("invalid national id or secret")

        token = generate_session_token(self._token_bytes)
        with self._lock:
            self._sessions[token] = user.id

        logger.info("login_succeeded", user_id=user.id, role=user.role.value)
        return AuthenticatedSession(token=token, user=user)

    def logout(self, token: str | None) -> bool:
        """
        Close a session.

        Returns:
            bool: True if the token belonged to an open session.
        """
        if not token:
            return False
        with self._lock:
            user_id = self._sessions.pop(token, None)
        if user_id is None:
            return False
        logger.info("logout", user_id=user_id)
        return True

    def resolve(self, token: str | None) -> User | None:
        """Operator owning an open session, or None."""
        if not token:
            return None
        with self._lock:
            user_id = self._sessions.get(token)
        if user_id is None:
            return None
        return self._users.get(user_id)

    async def restore(self, token: str | None) -> User | None:
        """
        Restore the session identified by a token.

        A single awaitable the guard waits on before deciding; no timeout
        is applied.
        """
        return self.resolve(token)

    async def session_state(self, token: str | None) -> SessionState:
        """Restore a session and describe it for the authorization guard."""
        user = await self.restore(token)
        if user is None:
            return SessionState.anonymous()
        return SessionState.authenticated(user)


def post_login_target(user: User, next_path: str | None = None) -> str:
    """
    Where to send an operator right after signing in.

    Args:
        user: The operator who just signed in.
        next_path: Path captured when the guard redirected to login.

    Returns:
        str: ``next_path`` when it is a safe local path other than "/",
            otherwise the home of the operator's role.
    """
    if next_path and next_path != "/" and is_safe_local_path(next_path):
        return next_path
    return home_for(user.role)
