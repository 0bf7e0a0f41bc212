from fastapi import APIRouter

from app.routers.applications import applications_router
from app.routers.universities import universities_router
from app.routers.parent import parent_router
from app.routers.student import student_router
from app.routers.shared import shared_router

main_router = APIRouter()

# Include domain-based routers
main_router.include_router(
    applications_router, prefix="/applications", tags=["Applications"]
)
main_router.include_router(
    universities_router, prefix="/universities", tags=["Universities"]
)
main_router.include_router(parent_router, prefix="/parent", tags=["Parent"])
main_router.include_router(student_router, prefix="/student", tags=["Student"])
main_router.include_router(shared_router, prefix="/shared", tags=["Shared Services"])
