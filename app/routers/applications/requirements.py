from fastapi import APIRouter, Depends, Request, status

from app.services.access_control import AccessPolicy, get_access_policy
from app.services.requirement_service import (
    RequirementService,
    get_requirement_service,
)
from app.schemas.requirement_schemas import ProgressUpdateRequest, ProgressUpsertRequest
from app.routers.path_params import application_id_path, requirement_id_path
from app.utils.responses import ResponseBuilder

requirements_router = APIRouter()


@requirements_router.get(
    "",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="List requirement progress of an application",
)
async def list_requirement_progress(
    request: Request,
    application_id: str = Depends(application_id_path),
    policy: AccessPolicy = Depends(get_access_policy),
    requirement_service: RequirementService = Depends(get_requirement_service),
):
    policy.load_for_read(application_id)

    progress = await requirement_service.list_progress(application_id)
    return ResponseBuilder.success(request=request, data=progress)


@requirements_router.post(
    "",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Set the progress of one requirement",
    description="Creates the progress row on first use and updates it afterwards.",
)
async def upsert_requirement_progress(
    request: Request,
    body: ProgressUpsertRequest,
    application_id: str = Depends(application_id_path),
    policy: AccessPolicy = Depends(get_access_policy),
    requirement_service: RequirementService = Depends(get_requirement_service),
):
    policy.load_for_write(application_id)

    progress = await requirement_service.upsert_requirement_progress(
        application_id, body.requirement_id, body.status, body.notes
    )
    return ResponseBuilder.success(
        request=request, data=progress, message="Requirement progress updated"
    )


@requirements_router.get(
    "/{requirement_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get the progress of one requirement",
    description="Returns `data: null` when the requirement has not been started on this application.",
)
async def get_requirement_progress(
    request: Request,
    application_id: str = Depends(application_id_path),
    requirement_id: str = Depends(requirement_id_path),
    policy: AccessPolicy = Depends(get_access_policy),
    requirement_service: RequirementService = Depends(get_requirement_service),
):
    policy.load_for_read(application_id)

    progress = await requirement_service.get_progress(application_id, requirement_id)
    return ResponseBuilder.success(request=request, data=progress)


@requirements_router.put(
    "/{requirement_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Update the progress of one requirement",
)
async def update_requirement_progress(
    request: Request,
    body: ProgressUpdateRequest,
    application_id: str = Depends(application_id_path),
    requirement_id: str = Depends(requirement_id_path),
    policy: AccessPolicy = Depends(get_access_policy),
    requirement_service: RequirementService = Depends(get_requirement_service),
):
    policy.load_for_write(application_id)

    progress = await requirement_service.upsert_requirement_progress(
        application_id, requirement_id, body.status, body.notes
    )
    return ResponseBuilder.success(
        request=request, data=progress, message="Requirement progress updated"
    )
