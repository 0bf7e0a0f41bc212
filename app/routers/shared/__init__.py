from fastapi import APIRouter

from .health import health_router
from .profile import profile_router

shared_router = APIRouter()

# Include sub-routers
shared_router.include_router(health_router, tags=["Shared - Health Checks"])
shared_router.include_router(profile_router, tags=["Shared - Profile"])

__all__ = ["shared_router"]
