from fastapi import APIRouter, Depends, Request, status

from app.middlewares.auth_middleware import AuthState, get_current_user
from app.services.profile_service import ProfileService, get_profile_service
from app.schemas.profile_schemas import ProfileUpsertRequest
from app.utils.responses import ResponseBuilder

# Served under the unversioned /api prefix for older clients
legacy_router = APIRouter()


@legacy_router.post(
    "/profiles",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Create or update the caller's profile",
    description="Upsert by user_id, for either role.",
)
async def save_profile(
    request: Request,
    body: ProfileUpsertRequest,
    current_user: AuthState = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    profile = await profile_service.save_own_profile(current_user.user_id, body)
    return ResponseBuilder.success(
        request=request, data=profile, message="Profile saved successfully"
    )
