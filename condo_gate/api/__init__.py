"""API routes package."""

from fastapi import APIRouter

from condo_gate.api.routes import access, admin, auth, dashboard, navigation

# Main API router
api_router = APIRouter(prefix="/api/v1")

# Include route modules
api_router.include_router(auth.router)
api_router.include_router(navigation.router)
api_router.include_router(dashboard.router)
api_router.include_router(access.router)
api_router.include_router(admin.router)
