"""Application layer package - use cases and services."""

from condo_gate.application.access_registration import (
    AccessRegistrationService,
    DashboardSummary,
)
from condo_gate.application.administration import AdministrationService, VehicleDraft
from condo_gate.application.audit_export import (
    ExportArtifact,
    render_csv,
    render_print_document,
)
from condo_gate.application.authentication import (
    AuthenticatedSession,
    AuthenticationError,
    AuthenticationService,
    post_login_target,
)
from condo_gate.application.container import ServiceContainer, build_container

__all__ = [
    # Registration
    "AccessRegistrationService",
    "DashboardSummary",
    # Administration
    "AdministrationService",
    "VehicleDraft",
    # Export
    "ExportArtifact",
    "render_csv",
    "render_print_document",
    # Authentication
    "AuthenticatedSession",
    "AuthenticationError",
    "AuthenticationService",
    "post_login_target",
    # Wiring
    "ServiceContainer",
    "build_container",
]
