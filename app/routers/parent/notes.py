from fastapi import APIRouter, Depends, Request, status

from app.db.models import Profile
from app.middlewares.auth_middleware import require_parent
from app.services.parent_note_service import (
    ParentNoteService,
    get_parent_note_service,
)
from app.schemas.parent_schemas import ParentNoteCreateRequest
from app.utils.responses import ResponseBuilder

notes_router = APIRouter()


@notes_router.post(
    "/notes",
    response_model=None,
    status_code=status.HTTP_201_CREATED,
    summary="Leave a note on a linked student's application",
)
async def create_note(
    request: Request,
    body: ParentNoteCreateRequest,
    parent: Profile = Depends(require_parent),
    note_service: ParentNoteService = Depends(get_parent_note_service),
):
    note = await note_service.create_parent_note(
        body.application_id, parent.user_id, body.note
    )
    return ResponseBuilder.success(
        request=request,
        data=note,
        message="Note added successfully",
        status_code=status.HTTP_201_CREATED,
    )
