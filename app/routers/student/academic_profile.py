from fastapi import APIRouter, Depends, Request, status

from app.db.models import Profile
from app.middlewares.auth_middleware import require_student
from app.services.profile_service import ProfileService, get_profile_service
from app.schemas.profile_schemas import AcademicProfileRequest
from app.utils.responses import ResponseBuilder

academic_profile_router = APIRouter()


@academic_profile_router.get(
    "/academic-profile",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get the caller's academic profile",
    description="Returns `data: null` until the profile has been saved once.",
)
async def get_academic_profile(
    request: Request,
    student: Profile = Depends(require_student),
    profile_service: ProfileService = Depends(get_profile_service),
):
    academic_profile = await profile_service.get_academic_profile(student.user_id)
    return ResponseBuilder.success(request=request, data=academic_profile)


@academic_profile_router.put(
    "/academic-profile",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Save the caller's academic profile",
)
async def save_academic_profile(
    request: Request,
    body: AcademicProfileRequest,
    student: Profile = Depends(require_student),
    profile_service: ProfileService = Depends(get_profile_service),
):
    academic_profile = await profile_service.upsert_academic_profile(
        student.user_id, body
    )
    return ResponseBuilder.success(
        request=request,
        data=academic_profile,
        message="Academic profile saved successfully",
    )
