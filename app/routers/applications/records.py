from fastapi import APIRouter, Depends, Request, status

from app.db.models import Profile
from app.middlewares.auth_middleware import require_student
from app.services.access_control import AccessPolicy, get_access_policy
from app.services.application_service import (
    ApplicationService,
    get_application_service,
)
from app.schemas.application_schemas import (
    ApplicationCreateRequest,
    ApplicationUpdateRequest,
)
from app.routers.path_params import application_id_path
from app.utils.responses import ResponseBuilder

applications_router = APIRouter()


@applications_router.get(
    "",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="List the caller's applications",
    description="All applications of the authenticated student with a university summary, newest first.",
)
async def list_applications(
    request: Request,
    student: Profile = Depends(require_student),
    application_service: ApplicationService = Depends(get_application_service),
):
    applications = await application_service.get_applications_for_student(
        student.user_id
    )
    return ResponseBuilder.paginated(
        request=request,
        data=applications,
        total=len(applications),
        limit=len(applications),
        offset=0,
    )


@applications_router.post(
    "",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    summary="Create an application",
    description="Start an application (status NOT_STARTED). A student can apply to each university once.",
)
async def create_application(
    request: Request,
    body: ApplicationCreateRequest,
    student: Profile = Depends(require_student),
    application_service: ApplicationService = Depends(get_application_service),
):
    application = await application_service.create_application(
        student_id=student.user_id,
        university_id=body.university_id,
        application_type=body.application_type,
        deadline=body.deadline,
        notes=body.notes,
    )
    return ResponseBuilder.success(
        request=request,
        data=application,
        message="Application created successfully",
        status_code=status.HTTP_201_CREATED,
    )


@applications_router.get(
    "/{application_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Get an application",
    description="The application with its full university record. Readable by the owner and linked parents.",
)
async def get_application(
    request: Request,
    application_id: str = Depends(application_id_path),
    policy: AccessPolicy = Depends(get_access_policy),
    application_service: ApplicationService = Depends(get_application_service),
):
    policy.load_for_read(application_id)

    application = await application_service.get_application_with_university(
        application_id
    )
    return ResponseBuilder.success(request=request, data=application)


@applications_router.put(
    "/{application_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Update an application",
    description="Partial update; only the supplied fields are written. Owner only.",
)
async def update_application(
    request: Request,
    body: ApplicationUpdateRequest,
    application_id: str = Depends(application_id_path),
    policy: AccessPolicy = Depends(get_access_policy),
    application_service: ApplicationService = Depends(get_application_service),
):
    policy.load_for_write(application_id)

    # Typed values of the fields present in the body, explicit nulls included
    patch = {field: getattr(body, field) for field in body.model_fields_set}
    application = await application_service.update_application(application_id, patch)
    return ResponseBuilder.success(
        request=request,
        data=application,
        message="Application updated successfully",
    )
