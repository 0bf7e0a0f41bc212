from fastapi import APIRouter, Depends, Request, status

from app.db.models import Profile
from app.middlewares.auth_middleware import require_student
from app.services.parent_link_service import (
    ParentLinkService,
    get_parent_link_service,
)
from app.schemas.parent_schemas import EmailSearchRequest, LinkParentRequest
from app.routers.path_params import parent_id_path
from app.utils.errors import NotFoundError
from app.utils.responses import ResponseBuilder

parents_router = APIRouter()


@parents_router.get(
    "/parents",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="List linked parents",
)
async def list_linked_parents(
    request: Request,
    student: Profile = Depends(require_student),
    link_service: ParentLinkService = Depends(get_parent_link_service),
):
    parents = await link_service.get_linked_parents(student.user_id)
    return ResponseBuilder.success(request=request, data=parents)


@parents_router.post(
    "/parents/search",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Find a parent by email",
    description="Exact email match among parent profiles, with whether they are already linked.",
)
async def search_parent(
    request: Request,
    body: EmailSearchRequest,
    student: Profile = Depends(require_student),
    link_service: ParentLinkService = Depends(get_parent_link_service),
):
    parent = await link_service.search_parent_by_email(student.user_id, body.email)
    if parent is None:
        raise NotFoundError(
            "No parent found with this email address", "PARENT_NOT_FOUND"
        )
    return ResponseBuilder.success(request=request, data=parent)


@parents_router.post(
    "/parents/link",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    summary="Link a parent to the caller",
)
async def link_parent(
    request: Request,
    body: LinkParentRequest,
    student: Profile = Depends(require_student),
    link_service: ParentLinkService = Depends(get_parent_link_service),
):
    link = await link_service.link_parent(student.user_id, body.parent_id)
    return ResponseBuilder.success(
        request=request,
        data={
            "parent_user_id": link.parent_user_id,
            "student_user_id": link.student_user_id,
        },
        message="Parent linked successfully",
        status_code=status.HTTP_201_CREATED,
    )


@parents_router.delete(
    "/parents/{parent_id}",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Unlink a parent",
    description="Idempotent; unlinking a parent who is not linked succeeds.",
)
async def unlink_parent(
    request: Request,
    parent_id: str = Depends(parent_id_path),
    student: Profile = Depends(require_student),
    link_service: ParentLinkService = Depends(get_parent_link_service),
):
    await link_service.delete_parent_link(parent_id, student.user_id)
    return ResponseBuilder.success(
        request=request, message="Parent unlinked successfully"
    )
