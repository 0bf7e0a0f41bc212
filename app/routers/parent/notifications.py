from fastapi import APIRouter, Depends, Request, status

from app.db.models import Profile
from app.middlewares.auth_middleware import require_parent
from app.services.parent_note_service import (
    ParentNoteService,
    get_parent_note_service,
)
from app.utils.responses import ResponseBuilder

parent_notifications_router = APIRouter()


@parent_notifications_router.get(
    "/notifications",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Recent notes written by the caller",
    description="The parent's ten most recent notes across all linked students.",
)
async def get_parent_notifications(
    request: Request,
    parent: Profile = Depends(require_parent),
    note_service: ParentNoteService = Depends(get_parent_note_service),
):
    items = await note_service.get_recent_notes_by_parent(parent.user_id)
    return ResponseBuilder.success(request=request, data=items, unread=len(items))
