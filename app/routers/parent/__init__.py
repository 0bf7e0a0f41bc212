from fastapi import APIRouter

from .links import links_router
from .student_profile import student_profile_router
from .notes import notes_router
from .notifications import parent_notifications_router

parent_router = APIRouter()

# Include sub-routers
parent_router.include_router(links_router, tags=["Parent - Linked Students"])
parent_router.include_router(
    student_profile_router, tags=["Parent - Student Profile"]
)
parent_router.include_router(notes_router, tags=["Parent - Notes"])
parent_router.include_router(
    parent_notifications_router, tags=["Parent - Notifications"]
)

__all__ = ["parent_router"]
