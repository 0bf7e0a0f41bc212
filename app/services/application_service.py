from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import select, nulls_last

from app.utils.logging import get_logger
from app.utils.errors import ConflictError, DatabaseError, NotFoundError
from app.db.models import Application, ApplicationStatus, ApplicationType, University
from app.db.session import get_sync_session
from app.schemas.application_schemas import (
    ApplicationDetailResponse,
    ApplicationResponse,
)

logger = get_logger()


class ApplicationService:
    """Service provider for a student's university applications"""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def get_applications_for_student(
        self, student_id: str, order_by_deadline: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Applications owned by `student_id`, each with a university summary.

        Newest first by default; `order_by_deadline` sorts by deadline
        ascending with undated applications last (the parent's view).
        """
        query = (
            select(Application)
            .options(joinedload(Application.university))
            .where(Application.student_id == student_id)
        )
        if order_by_deadline:
            query = query.order_by(
                nulls_last(Application.deadline.asc()), Application.created_at.desc()
            )
        else:
            query = query.order_by(Application.created_at.desc())

        applications = self.db.execute(query).scalars().all()
        return [
            ApplicationResponse.model_validate(application).model_dump()
            for application in applications
        ]

    async def get_application(self, application_id: str) -> Optional[Application]:
        return self.db.get(Application, application_id)

    async def get_application_with_university(
        self, application_id: str
    ) -> Dict[str, Any]:
        application = self.db.execute(
            select(Application)
            .options(joinedload(Application.university))
            .where(Application.id == application_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

        if not application:
            raise NotFoundError("Application not found", "APPLICATION_NOT_FOUND")

        return ApplicationDetailResponse.model_validate(application).model_dump()

    async def application_exists(self, student_id: str, university_id: str) -> bool:
        result = self.db.execute(
            select(Application.id).where(
                Application.student_id == student_id,
                Application.university_id == university_id,
            )
        )
        return result.first() is not None

    async def create_application(
        self,
        student_id: str,
        university_id: str,
        application_type: Optional[ApplicationType] = None,
        deadline: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create an application in NOT_STARTED for a university the student has not applied to yet"""
        if not self.db.get(University, university_id):
            raise NotFoundError("University not found", "UNIVERSITY_NOT_FOUND")

        if await self.application_exists(student_id, university_id):
            raise ConflictError(
                "Application already exists for this university", "APPLICATION_EXISTS"
            )

        application = Application(
            student_id=student_id,
            university_id=university_id,
            application_type=application_type,
            deadline=deadline,
            notes=notes,
            status=ApplicationStatus.NOT_STARTED,
        )

        try:
            self.db.add(application)
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same pair
            self.db.rollback()
            raise ConflictError(
                "Application already exists for this university", "APPLICATION_EXISTS"
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create application: {e}")
            raise DatabaseError("Failed to create application")

        logger.info(
            f"Created application {application.id} for student {student_id} "
            f"at university {university_id}"
        )
        return await self.get_application_with_university(application.id)

    async def update_application(
        self, application_id: str, patch: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Write only the supplied fields; status transitions are not enforced"""
        application = await self.get_application(application_id)
        if not application:
            raise NotFoundError("Application not found", "APPLICATION_NOT_FOUND")

        for field, value in patch.items():
            setattr(application, field, value)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update application {application_id}: {e}")
            raise DatabaseError("Failed to update application")

        logger.info(
            f"Updated application {application_id}: {', '.join(sorted(patch)) or 'no fields'}"
        )
        return await self.get_application_with_university(application_id)


def get_application_service(
    db: Session = Depends(get_sync_session),
) -> ApplicationService:
    """Dependency to provide ApplicationService instance"""
    return ApplicationService(db)
