from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import delete, select

from app.utils.logging import get_logger
from app.utils.errors import ConflictError, DatabaseError, NotFoundError
from app.db.models import ParentLink, Profile, UserRole
from app.db.session import get_sync_session
from app.schemas.parent_schemas import (
    LinkedParentResponse,
    LinkedStudentResponse,
    ParentSearchResponse,
)
from app.schemas.profile_schemas import ProfileSummary

logger = get_logger()


class ParentLinkService:
    """Service provider for parent to student links, the only edge granting a parent access"""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def link_exists(self, parent_id: str, student_id: str) -> bool:
        return self.db.get(ParentLink, (parent_id, student_id)) is not None

    async def create_parent_link(self, parent_id: str, student_id: str) -> ParentLink:
        """Link `parent_id` to the student profile `student_id`"""
        student = self.db.get(Profile, student_id)
        if not student or student.role != UserRole.STUDENT:
            raise NotFoundError("Student not found", "STUDENT_NOT_FOUND")

        return self._insert_link(
            parent_id, student_id, "This student is already linked to your account"
        )

    async def link_parent(self, student_id: str, parent_id: str) -> ParentLink:
        """Student-initiated link to the parent profile `parent_id`"""
        parent = self.db.get(Profile, parent_id)
        if not parent or parent.role != UserRole.PARENT:
            raise NotFoundError("Parent not found", "PARENT_NOT_FOUND")

        return self._insert_link(
            parent_id, student_id, "This parent is already linked to your account"
        )

    def _insert_link(
        self, parent_id: str, student_id: str, conflict_message: str
    ) -> ParentLink:
        if self.db.get(ParentLink, (parent_id, student_id)) is not None:
            raise ConflictError(conflict_message, "LINK_EXISTS")

        # The composite primary key still rejects a concurrent duplicate
        link = ParentLink(parent_user_id=parent_id, student_user_id=student_id)
        try:
            self.db.add(link)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(conflict_message, "LINK_EXISTS")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create parent link: {e}")
            raise DatabaseError("Failed to link accounts")

        logger.info(f"Linked parent {parent_id} to student {student_id}")
        return link

    async def delete_parent_link(self, parent_id: str, student_id: str) -> int:
        """Remove the link if present; returns the number of rows removed"""
        try:
            result = self.db.execute(
                delete(ParentLink).where(
                    ParentLink.parent_user_id == parent_id,
                    ParentLink.student_user_id == student_id,
                )
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete parent link: {e}")
            raise DatabaseError("Failed to unlink accounts")

        if result.rowcount:
            logger.info(f"Unlinked parent {parent_id} from student {student_id}")
        return result.rowcount

    async def search_student_by_email(self, email: str) -> List[Profile]:
        """Exact email match among student profiles"""
        return list(
            self.db.execute(
                select(Profile).where(
                    Profile.email == email.strip(), Profile.role == UserRole.STUDENT
                )
            )
            .scalars()
            .all()
        )

    async def search_unlinked_students(
        self, parent_id: str, email: str
    ) -> List[Dict[str, Any]]:
        """
        Students matching `email` that the parent is not linked to yet.

        Raises NotFoundError when nobody matches and ConflictError when every
        match is already linked.
        """
        students = await self.search_student_by_email(email)
        if not students:
            raise NotFoundError(
                "No student found with this email address", "STUDENT_NOT_FOUND"
            )

        linked_ids = set(await self.get_linked_student_ids(parent_id))
        unlinked = [s for s in students if s.user_id not in linked_ids]
        if not unlinked:
            raise ConflictError(
                "This student is already linked to your account", "LINK_EXISTS"
            )

        return [ProfileSummary.model_validate(s).model_dump() for s in unlinked]

    async def search_parent_by_email(
        self, student_id: str, email: str
    ) -> Optional[Dict[str, Any]]:
        parent = self.db.execute(
            select(Profile).where(
                Profile.email == email.strip(), Profile.role == UserRole.PARENT
            )
        ).scalars().first()
        if not parent:
            return None

        result = ParentSearchResponse.model_validate(parent)
        result.is_linked = await self.link_exists(parent.user_id, student_id)
        return result.model_dump()

    async def get_linked_student_ids(self, parent_id: str) -> List[str]:
        return list(
            self.db.execute(
                select(ParentLink.student_user_id)
                .where(ParentLink.parent_user_id == parent_id)
                .order_by(ParentLink.created_at.asc())
            )
            .scalars()
            .all()
        )

    async def get_linked_students(self, parent_id: str) -> List[Dict[str, Any]]:
        rows = self.db.execute(
            select(Profile, ParentLink.created_at)
            .join(ParentLink, ParentLink.student_user_id == Profile.user_id)
            .where(ParentLink.parent_user_id == parent_id)
            .order_by(ParentLink.created_at.asc())
        ).all()
        students = []
        for profile, linked_at in rows:
            item = LinkedStudentResponse.model_validate(profile)
            item.linked_at = linked_at
            students.append(item.model_dump())
        return students

    async def get_linked_parents(self, student_id: str) -> List[Dict[str, Any]]:
        rows = self.db.execute(
            select(Profile, ParentLink.created_at)
            .join(ParentLink, ParentLink.parent_user_id == Profile.user_id)
            .where(ParentLink.student_user_id == student_id)
            .order_by(ParentLink.created_at.asc())
        ).all()
        parents = []
        for profile, linked_at in rows:
            item = LinkedParentResponse.model_validate(profile)
            item.linked_at = linked_at
            parents.append(item.model_dump())
        return parents


def get_parent_link_service(
    db: Session = Depends(get_sync_session),
) -> ParentLinkService:
    """Dependency to provide ParentLinkService instance"""
    return ParentLinkService(db)
