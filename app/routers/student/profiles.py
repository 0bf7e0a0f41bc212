from fastapi import APIRouter, Depends, Request, status

from app.db.models import UserRole
from app.middlewares.auth_middleware import AuthState, get_current_user
from app.services.profile_service import ProfileService, get_profile_service
from app.schemas.profile_schemas import ProfileUpsertRequest
from app.utils.responses import ResponseBuilder

profiles_router = APIRouter()


@profiles_router.post(
    "/profiles",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Create or update the caller's profile",
    description="Upsert by user_id. An existing profile must belong to a student.",
)
async def save_student_profile(
    request: Request,
    body: ProfileUpsertRequest,
    current_user: AuthState = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    profile = await profile_service.save_own_profile(
        current_user.user_id, body, existing_role=UserRole.STUDENT
    )
    return ResponseBuilder.success(
        request=request, data=profile, message="Profile saved successfully"
    )
