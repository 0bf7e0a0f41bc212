from fastapi import APIRouter, Depends, Request, status

from app.db.models import Profile
from app.middlewares.auth_middleware import get_current_profile
from app.services.profile_service import ProfileService, get_profile_service
from app.schemas.profile_schemas import ProfileResponse, ProfileUpdateRequest
from app.utils.responses import ResponseBuilder

profile_router = APIRouter()


@profile_router.get(
    "/profile",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get the caller's profile",
)
async def get_profile(
    request: Request,
    profile: Profile = Depends(get_current_profile),
):
    return ResponseBuilder.success(
        request=request, data=ProfileResponse.model_validate(profile).model_dump()
    )


@profile_router.patch(
    "/profile",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Update the caller's profile",
    description="Names and email only; the role cannot be changed here.",
)
async def update_profile(
    request: Request,
    body: ProfileUpdateRequest,
    profile: Profile = Depends(get_current_profile),
    profile_service: ProfileService = Depends(get_profile_service),
):
    updated = await profile_service.update_profile(profile, body)
    return ResponseBuilder.success(
        request=request, data=updated, message="Profile updated successfully"
    )
