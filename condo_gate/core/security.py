"""
Security helpers for operator sessions.

Provides constant-time secret comparison, session token generation and
validation of post-login redirect targets.
"""

import secrets
from urllib.parse import urlsplit

from condo_gate.core.config import get_settings


def generate_session_token(num_bytes: int | None = None) -> str:
    """
    Create an unguessable, URL-safe session token.

    Args:
        num_bytes: Entropy in bytes. Defaults to ``session_token_bytes``.

    Returns:
        str: Token suitable for an ``Authorization: Bearer`` header.
    """
    if num_bytes is None:
        num_bytes = get_settings().session_token_bytes
    return secrets.token_urlsafe(num_bytes)


def secrets_match(provided: str, expected: str) -> bool:
    """Compare two secrets in constant time."""
    return secrets.compare_digest(
        provided.encode("utf8"),
        expected.encode("utf8"),
    )


def is_safe_local_path(target: str | None) -> bool:
    """
    Check a redirect target stays inside this application.

    Only absolute local paths are accepted: no scheme, no host and no
    protocol-relative ``//`` prefix.

    Example:
        >>> is_safe_local_path("/access/history")
        True
        >>> is_safe_local_path("//evil.example/login")
        False
    """
    if not target or not target.startswith("/") or target.startswith("//"):
        return False
    if "\\" in target:
        return False
    parts = urlsplit(target)
    return not parts.scheme and not parts.netloc
