"""
Student notifications, derived on every call.

Nothing is persisted: deadline reminders come from the student's applications
and parent items from the notes left on them. `unread` is simply the number
of items, since there is no read state to track.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import select

from app.config.settings import settings
from app.utils.logging import get_logger
from app.utils.datetime_utils import days_until, to_utc, utc_today
from app.db.models import Application, ParentNote
from app.db.session import get_sync_session
from app.schemas.notification_schemas import NotificationItem

logger = get_logger()

PARENT_NOTE_TITLE = "New message from parent"


def deadline_message(days: int) -> str:
    if days == 0:
        return "Deadline today"
    return f"Deadline in {days} day{'s' if days > 1 else ''}"


def _sort_key(item: NotificationItem) -> datetime:
    # Deadlines are plain dates; compare them as midnight UTC
    if isinstance(item.date, datetime):
        return to_utc(item.date)
    return datetime.combine(item.date, time.min, tzinfo=timezone.utc)


class NotificationService:
    """Service provider for derived student notifications"""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def get_notifications_for_student(
        self, student_id: str, today: Optional[date] = None
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Return (items sorted by date descending, unread count)"""
        today = today or utc_today()
        window_end = today + timedelta(days=settings.NOTIFICATION_WINDOW_DAYS)

        applications = (
            self.db.execute(
                select(Application)
                .options(joinedload(Application.university))
                .where(Application.student_id == student_id)
            )
            .scalars()
            .all()
        )

        items: List[NotificationItem] = []
        for application in applications:
            if application.deadline is None:
                continue
            if not today <= application.deadline <= window_end:
                continue
            days = days_until(application.deadline, today)
            items.append(
                NotificationItem(
                    id=f"dl-{application.id}-{days}",
                    type="deadline",
                    title=application.university.name
                    if application.university
                    else "University",
                    message=deadline_message(days),
                    date=application.deadline,
                    application_id=application.id,
                )
            )

        application_ids = [application.id for application in applications]
        if application_ids:
            notes = self.db.execute(
                select(ParentNote).where(ParentNote.application_id.in_(application_ids))
            ).scalars()
            for note in notes:
                items.append(
                    NotificationItem(
                        id=f"pn-{note.id}",
                        type="parent",
                        title=PARENT_NOTE_TITLE,
                        message=note.note,
                        date=note.created_at,
                        application_id=note.application_id,
                    )
                )

        items.sort(key=_sort_key, reverse=True)
        logger.debug(f"Derived {len(items)} notifications for student {student_id}")
        return [item.model_dump() for item in items], len(items)


def get_notification_service(
    db: Session = Depends(get_sync_session),
) -> NotificationService:
    """Dependency to provide NotificationService instance"""
    return NotificationService(db)
