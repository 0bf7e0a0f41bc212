from fastapi import APIRouter

from .notifications import notifications_router
from .profiles import profiles_router
from .parents import parents_router
from .academic_profile import academic_profile_router
from .files import files_router

student_router = APIRouter()

# Include sub-routers
student_router.include_router(notifications_router, tags=["Student - Notifications"])
student_router.include_router(profiles_router, tags=["Student - Profile"])
student_router.include_router(parents_router, tags=["Student - Linked Parents"])
student_router.include_router(
    academic_profile_router, tags=["Student - Academic Profile"]
)
student_router.include_router(files_router, tags=["Student - Files"])

__all__ = ["student_router"]
