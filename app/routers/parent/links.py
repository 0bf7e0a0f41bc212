from fastapi import APIRouter, Depends, Request, status

from app.db.models import Profile
from app.middlewares.auth_middleware import require_parent
from app.services.application_service import (
    ApplicationService,
    get_application_service,
)
from app.services.parent_link_service import (
    ParentLinkService,
    get_parent_link_service,
)
from app.schemas.parent_schemas import EmailSearchRequest, LinkStudentRequest
from app.routers.path_params import student_id_path
from app.utils.errors import AuthorizationError
from app.utils.responses import ResponseBuilder

links_router = APIRouter()


@links_router.post(
    "/link-student",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    summary="Link a student to the caller",
    description="Grants the parent read and note access to the student's applications.",
)
async def link_student(
    request: Request,
    body: LinkStudentRequest,
    parent: Profile = Depends(require_parent),
    link_service: ParentLinkService = Depends(get_parent_link_service),
):
    link = await link_service.create_parent_link(parent.user_id, body.student_id)
    return ResponseBuilder.success(
        request=request,
        data={
            "parent_user_id": link.parent_user_id,
            "student_user_id": link.student_user_id,
        },
        message="Student linked successfully",
        status_code=status.HTTP_201_CREATED,
    )


@links_router.post(
    "/search-students",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Find students by email",
    description="Exact email match among students the caller is not linked to yet.",
)
async def search_students(
    request: Request,
    body: EmailSearchRequest,
    parent: Profile = Depends(require_parent),
    link_service: ParentLinkService = Depends(get_parent_link_service),
):
    students = await link_service.search_unlinked_students(parent.user_id, body.email)
    return ResponseBuilder.success(request=request, data=students)


@links_router.get(
    "/students",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="List linked students",
)
async def list_linked_students(
    request: Request,
    parent: Profile = Depends(require_parent),
    link_service: ParentLinkService = Depends(get_parent_link_service),
):
    students = await link_service.get_linked_students(parent.user_id)
    return ResponseBuilder.success(request=request, data=students)


@links_router.delete(
    "/students/{student_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Unlink a student",
    description="Idempotent; unlinking a student who is not linked succeeds.",
)
async def unlink_student(
    request: Request,
    student_id: str = Depends(student_id_path),
    parent: Profile = Depends(require_parent),
    link_service: ParentLinkService = Depends(get_parent_link_service),
):
    await link_service.delete_parent_link(parent.user_id, student_id)
    return ResponseBuilder.success(
        request=request, message="Student unlinked successfully"
    )


@links_router.get(
    "/students/{student_id}/applications",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="List a linked student's applications",
    description="Ordered by deadline, undated applications last.",
)
async def list_student_applications(
    request: Request,
    student_id: str = Depends(student_id_path),
    parent: Profile = Depends(require_parent),
    link_service: ParentLinkService = Depends(get_parent_link_service),
    application_service: ApplicationService = Depends(get_application_service),
):
    if not await link_service.link_exists(parent.user_id, student_id):
        raise AuthorizationError(
            "Access denied. Student is not linked to your account.",
            "STUDENT_NOT_LINKED",
        )

    applications = await application_service.get_applications_for_student(
        student_id, order_by_deadline=True
    )
    return ResponseBuilder.success(request=request, data=applications)
