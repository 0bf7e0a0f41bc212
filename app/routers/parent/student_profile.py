from typing import Optional

from fastapi import APIRouter, Depends, Request, status, Query

from app.db.models import Profile
from app.middlewares.auth_middleware import require_parent
from app.services.parent_link_service import (
    ParentLinkService,
    get_parent_link_service,
)
from app.services.profile_service import ProfileService, get_profile_service
from app.services.storage_service import StorageService, get_storage_service
from app.schemas.parent_schemas import StudentProfileView
from app.schemas.storage_schemas import StudentFilesResponse
from app.utils.errors import AuthorizationError, NotFoundError, StorageError
from app.utils.logging import get_logger
from app.utils.responses import ResponseBuilder
from app.utils.validators import validate_uuid

logger = get_logger()

student_profile_router = APIRouter()


@student_profile_router.get(
    "/student-profile",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="View a linked student's profile",
    description=(
        "Profile, academic profile and uploaded files of a linked student. "
        "Without `student_id` the first linked student is shown."
    ),
)
async def get_student_profile(
    request: Request,
    student_id: Optional[str] = Query(None, description="Linked student's user ID"),
    parent: Profile = Depends(require_parent),
    link_service: ParentLinkService = Depends(get_parent_link_service),
    profile_service: ProfileService = Depends(get_profile_service),
    storage_service: StorageService = Depends(get_storage_service),
):
    if student_id is not None:
        student_id = validate_uuid(student_id, "student ID")
        if not await link_service.link_exists(parent.user_id, student_id):
            raise AuthorizationError(
                "Access denied. Student is not linked to your account.",
                "STUDENT_NOT_LINKED",
            )
    else:
        linked_ids = await link_service.get_linked_student_ids(parent.user_id)
        if not linked_ids:
            raise NotFoundError("No linked students found", "NO_LINKED_STUDENTS")
        student_id = linked_ids[0]

    summary = await profile_service.get_student_summary(student_id)
    academic_profile = await profile_service.get_academic_profile(student_id)

    # The page still renders without files when storage is unavailable
    try:
        files = await storage_service.list_student_files(student_id)
    except StorageError as e:
        logger.warning(f"Could not list files for student {student_id}: {e.message}")
        files = StudentFilesResponse().model_dump()

    view = StudentProfileView(
        **summary, academic_profile=academic_profile, files=files
    )
    return ResponseBuilder.success(request=request, data=view.model_dump())
