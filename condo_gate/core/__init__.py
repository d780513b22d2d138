"""Core configuration and utilities package."""

from condo_gate.core.config import Settings, get_settings
from condo_gate.core.logging import (
    bind_operator,
    get_correlation_id,
    get_logger,
    mask_personal_data,
    set_correlation_id,
    setup_logging,
)
from condo_gate.core.security import (
    generate_session_token,
    is_safe_local_path,
    secrets_match,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "bind_operator",
    "get_correlation_id",
    "get_logger",
    "mask_personal_data",
    "set_correlation_id",
    "setup_logging",
    # Security
    "generate_session_token",
    "is_safe_local_path",
    "secrets_match",
]
