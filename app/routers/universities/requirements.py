from typing import Optional

from fastapi import APIRouter, Depends, Request, status, Query
from sqlalchemy.orm import Session

from app.db.session import get_sync_session
from app.middlewares.auth_middleware import (
    AuthState,
    get_current_profile,
    get_current_user,
    require_service_key,
)
from app.services.access_control import policy_for
from app.services.requirement_service import (
    RequirementService,
    get_requirement_service,
)
from app.schemas.university_schemas import RequirementCreateRequest
from app.routers.path_params import university_id_path
from app.utils.errors import NotFoundError
from app.utils.responses import ResponseBuilder
from app.utils.validators import validate_uuid

university_requirements_router = APIRouter()


@university_requirements_router.get(
    "",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="List a university's requirements",
    description=(
        "Requirements ordered by order_index. With `application_id`, each item "
        "carries that application's progress row in `application_requirement_progress`."
    ),
)
async def list_university_requirements(
    request: Request,
    university_id: str = Depends(university_id_path),
    application_id: Optional[str] = Query(
        None, description="Include progress for this application"
    ),
    current_user: AuthState = Depends(get_current_user),
    db: Session = Depends(get_sync_session),
    requirement_service: RequirementService = Depends(get_requirement_service),
):
    if application_id is not None:
        application_id = validate_uuid(application_id, "application ID")
        # Progress is only shown to callers who may read the application
        policy = policy_for(db, get_current_profile(current_user, db))
        application = policy.load_for_read(application_id)
        if application.university_id != university_id:
            raise NotFoundError(
                "Application does not belong to this university",
                "APPLICATION_NOT_FOUND",
            )

    requirements = await requirement_service.get_requirements(
        university_id, application_id
    )
    return ResponseBuilder.success(request=request, data=requirements)


@university_requirements_router.post(
    "",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    summary="Add a requirement to a university",
    description="Reference data maintenance; requires the X-Service-Key header.",
    dependencies=[Depends(require_service_key)],
)
async def create_university_requirement(
    request: Request,
    body: RequirementCreateRequest,
    university_id: str = Depends(university_id_path),
    requirement_service: RequirementService = Depends(get_requirement_service),
):
    requirement = await requirement_service.create_requirement(university_id, body)
    return ResponseBuilder.success(
        request=request,
        data=requirement,
        message="Requirement created successfully",
        status_code=status.HTTP_201_CREATED,
    )
