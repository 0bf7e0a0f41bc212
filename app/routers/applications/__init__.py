from .records import applications_router
from .requirements import requirements_router
from .parent_notes import parent_notes_router

# Include sub-routers
applications_router.include_router(
    requirements_router,
    prefix="/{application_id}/requirements",
    tags=["Applications - Requirement Progress"],
)
applications_router.include_router(
    parent_notes_router,
    prefix="/{application_id}/parent-notes",
    tags=["Applications - Parent Notes"],
)

__all__ = ["applications_router"]
