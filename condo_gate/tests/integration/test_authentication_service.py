"""
Integration tests for the authentication service over seeded operators.
"""

import pytest

from condo_gate.application.authentication import (
    AuthenticationError,
    AuthenticationService,
    post_login_target,
)
from condo_gate.domain.guard import SessionStatus
from condo_gate.domain.models import Role


@pytest.fixture
def auth(container) -> AuthenticationService:
    return container.auth


class TestLogin:
    """Tests for login/logout."""

    def test_formatted_and_bare_national_id(self, auth: AuthenticationService):
        """Test formatted and bare national ids sign in the same operator."""
        formatted = auth.login("123.456.789-00", "123456")
        bare = auth.login("12345678900", "123456")

        assert formatted.user.id == bare.user.id == "1"
        assert formatted.token != bare.token

    def test_wrong_secret_rejected(self, auth: AuthenticationService):
        """Test a wrong secret is rejected."""
        with pytest.raises(AuthenticationError):
            auth.login("123.456.789-00", "wrong")

    def test_unknown_operator_rejected(self, auth: AuthenticationService):
        """Test an unknown national id is rejected."""
        with pytest.raises(AuthenticationError):
            auth.login("000.000.000-00", "123456")

    def test_logout_closes_session(self, auth: AuthenticationService):
        """Test logout closes the session once."""
        session = auth.login("987.654.321-00", "admin123")

        assert auth.logout(session.token) is True
        assert auth.logout(session.token) is False
        assert auth.resolve(session.token) is None


class TestRestore:
    """Tests for async session restoration."""

    @pytest.mark.asyncio
    async def test_restore_open_session(self, auth: AuthenticationService):
        """Test restoring an open session returns its operator."""
        session = auth.login("987.654.321-00", "admin123")

        user = await auth.restore(session.token)

        assert user.role == Role.ADMINISTRATOR

    @pytest.mark.asyncio
    async def test_restore_unknown_token(self, auth: AuthenticationService):
        """Test restoring an unknown token returns None."""
        assert await auth.restore("not-a-token") is None
        assert await auth.restore(None) is None

    @pytest.mark.asyncio
    async def test_session_state(self, auth: AuthenticationService):
        """Test session state is anonymous or authenticated."""
        session = auth.login("123.456.789-00", "123456")

        signed_in = await auth.session_state(session.token)
        anonymous = await auth.session_state(None)

        assert signed_in.status == SessionStatus.AUTHENTICATED
        assert signed_in.user.name == "João Porteiro"
        assert anonymous.status == SessionStatus.UNAUTHENTICATED


class TestPostLoginTarget:
    """Tests for post_login_target."""

    def test_origin_wins(self, auth: AuthenticationService):
        """Test a safe origin is the post-login target."""
        user = auth.login("123.456.789-00", "123456").user
        assert post_login_target(user, "/access/history") == "/access/history"

    @pytest.mark.parametrize("next_path", [None, "", "/", "https://evil.example/"])
    def test_falls_back_to_role_home(self, auth: AuthenticationService, next_path):
        """Test unsafe or missing origins fall back to the role home."""
        gatekeeper = auth.login("123.456.789-00", "123456").user
        admin = auth.login("987.654.321-00", "admin123").user

        assert post_login_target(gatekeeper, next_path) == "/dashboard"
        assert post_login_target(admin, next_path) == "/admin/dashboard"
