from fastapi import APIRouter, Depends, Request, status

from app.db.models import Profile
from app.middlewares.auth_middleware import require_student
from app.services.notification_service import (
    NotificationService,
    get_notification_service,
)
from app.utils.responses import ResponseBuilder

notifications_router = APIRouter()


@notifications_router.get(
    "/notifications",
    response_model=None,
    status_code=status.HTTP_200_OK,
    summary="Deadline reminders and parent notes",
    description=(
        "Derived on each call: deadlines within the next 14 days and every parent "
        "note on the student's applications, newest first. `unread` is the item count."
    ),
)
async def get_notifications(
    request: Request,
    student: Profile = Depends(require_student),
    notification_service: NotificationService = Depends(get_notification_service),
):
    items, unread = await notification_service.get_notifications_for_student(
        student.user_id
    )
    return ResponseBuilder.success(request=request, data=items, unread=unread)
