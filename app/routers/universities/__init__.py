from .records import universities_router
from .requirements import university_requirements_router

# Include sub-routers
universities_router.include_router(
    university_requirements_router,
    prefix="/{university_id}/requirements",
    tags=["Universities - Requirements"],
)

__all__ = ["universities_router"]
