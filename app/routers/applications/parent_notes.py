from fastapi import APIRouter, Depends, Request, status

from app.services.access_control import AccessPolicy, get_access_policy
from app.services.parent_note_service import (
    ParentNoteService,
    get_parent_note_service,
)
from app.routers.path_params import application_id_path
from app.utils.responses import ResponseBuilder

parent_notes_router = APIRouter()


@parent_notes_router.get(
    "",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="List parent notes on an application",
    description="A parent sees the notes they wrote; the owning student sees every note with its author's name.",
)
async def list_parent_notes(
    request: Request,
    application_id: str = Depends(application_id_path),
    policy: AccessPolicy = Depends(get_access_policy),
    note_service: ParentNoteService = Depends(get_parent_note_service),
):
    policy.load_for_read(application_id)

    if policy.sees_only_own_notes:
        notes = await note_service.get_notes_by_parent(application_id, policy.user_id)
    else:
        notes = await note_service.get_notes_for_application(application_id)

    return ResponseBuilder.success(request=request, data=notes)
