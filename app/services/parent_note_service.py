from typing import Any, Dict, List

from fastapi import Depends
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select

from app.utils.logging import get_logger
from app.utils.errors import AuthorizationError, BadRequestError, DatabaseError
from app.db.models import Application, ParentNote, UserRole
from app.db.session import get_sync_session
from app.schemas.parent_schemas import ParentNoteResponse, ParentNotificationItem
from app.schemas.profile_schemas import ProfileSummary
from app.services.access_control import can_access_application

logger = get_logger()

MAX_NOTE_LENGTH = 2000
RECENT_NOTES_LIMIT = 10


class ParentNoteService:
    """Service provider for notes parents leave on their children's applications"""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def create_parent_note(
        self, application_id: str, parent_id: str, note: str
    ) -> Dict[str, Any]:
        """Create a note; the parent must be linked to the application's student"""
        if not note or not note.strip():
            raise BadRequestError("note is required")
        if len(note) > MAX_NOTE_LENGTH:
            raise BadRequestError(
                f"note must be less than {MAX_NOTE_LENGTH} characters"
            )

        if not can_access_application(
            self.db, parent_id, application_id, UserRole.PARENT
        ):
            raise AuthorizationError(
                "Access denied to this application", "APPLICATION_ACCESS_DENIED"
            )

        parent_note = ParentNote(
            application_id=application_id, parent_user_id=parent_id, note=note
        )
        try:
            self.db.add(parent_note)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create parent note: {e}")
            raise DatabaseError("Failed to create note")

        logger.info(f"Parent {parent_id} added note {parent_note.id} to {application_id}")
        return ParentNoteResponse.model_validate(parent_note).model_dump(
            exclude={"parent"}
        )

    async def get_notes_by_parent(
        self, application_id: str, parent_id: str
    ) -> List[Dict[str, Any]]:
        """The parent's own notes on one application, newest first"""
        notes = self.db.execute(
            select(ParentNote)
            .where(
                ParentNote.application_id == application_id,
                ParentNote.parent_user_id == parent_id,
            )
            .order_by(ParentNote.created_at.desc())
        ).scalars()
        return [
            ParentNoteResponse.model_validate(n).model_dump(exclude={"parent"})
            for n in notes
        ]

    async def get_notes_for_application(
        self, application_id: str
    ) -> List[Dict[str, Any]]:
        """Every note on the application with its author's name, newest first"""
        notes = self.db.execute(
            select(ParentNote)
            .options(joinedload(ParentNote.parent))
            .where(ParentNote.application_id == application_id)
            .order_by(ParentNote.created_at.desc())
        ).scalars()
        return [ParentNoteResponse.model_validate(n).model_dump() for n in notes]

    async def get_recent_notes_by_parent(
        self, parent_id: str, limit: int = RECENT_NOTES_LIMIT
    ) -> List[Dict[str, Any]]:
        """The parent's latest notes across all linked students"""
        notes = self.db.execute(
            select(ParentNote)
            .options(
                joinedload(ParentNote.application).joinedload(Application.student),
                joinedload(ParentNote.application).joinedload(Application.university),
            )
            .where(ParentNote.parent_user_id == parent_id)
            .order_by(ParentNote.created_at.desc())
            .limit(limit)
        ).scalars()

        items = []
        for n in notes:
            items.append(
                ParentNotificationItem(
                    id=n.id,
                    application_id=n.application_id,
                    note=n.note,
                    created_at=n.created_at,
                    student=ProfileSummary.model_validate(n.application.student),
                    university_name=n.application.university.name,
                ).model_dump()
            )
        return items


def get_parent_note_service(
    db: Session = Depends(get_sync_session),
) -> ParentNoteService:
    """Dependency to provide ParentNoteService instance"""
    return ParentNoteService(db)
