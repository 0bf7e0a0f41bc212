from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select

from app.utils.logging import get_logger
from app.utils.errors import DatabaseError, NotFoundError
from app.utils.datetime_utils import utc_now
from app.db.models import (
    Application,
    ApplicationRequirementProgress,
    RequirementStatus,
    University,
    UniversityRequirement,
)
from app.db.session import get_sync_session
from app.db.upsert import upsert
from app.schemas.university_schemas import (
    ProgressResponse,
    RequirementCreateRequest,
    RequirementResponse,
    RequirementWithProgressResponse,
)

logger = get_logger()


class RequirementService:
    """Service provider for university requirement checklists and per-application progress"""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def get_requirements(
        self, university_id: str, application_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Requirements of a university ordered by `order_index`.

        With `application_id`, each requirement carries the application's
        progress row in `application_requirement_progress` (empty list when none).
        """
        if not self.db.get(University, university_id):
            raise NotFoundError("University not found", "UNIVERSITY_NOT_FOUND")

        ordering = (UniversityRequirement.order_index.asc(), UniversityRequirement.id)

        if not application_id:
            requirements = self.db.execute(
                select(UniversityRequirement)
                .where(UniversityRequirement.university_id == university_id)
                .order_by(*ordering)
            ).scalars()
            return [
                RequirementResponse.model_validate(requirement).model_dump()
                for requirement in requirements
            ]

        rows = self.db.execute(
            select(UniversityRequirement, ApplicationRequirementProgress)
            .outerjoin(
                ApplicationRequirementProgress,
                (ApplicationRequirementProgress.requirement_id == UniversityRequirement.id)
                & (ApplicationRequirementProgress.application_id == application_id),
            )
            .where(UniversityRequirement.university_id == university_id)
            .order_by(*ordering)
        ).all()

        requirements = []
        for requirement, progress in rows:
            item = RequirementWithProgressResponse.model_validate(requirement)
            if progress is not None:
                item.application_requirement_progress = [
                    ProgressResponse.model_validate(progress)
                ]
            requirements.append(item.model_dump())
        return requirements

    async def create_requirement(
        self, university_id: str, data: RequirementCreateRequest
    ) -> Dict[str, Any]:
        if not self.db.get(University, university_id):
            raise NotFoundError("University not found", "UNIVERSITY_NOT_FOUND")

        requirement = UniversityRequirement(
            university_id=university_id, **data.model_dump()
        )
        try:
            self.db.add(requirement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create requirement: {e}")
            raise DatabaseError("Failed to create requirement")

        logger.info(
            f"Created requirement '{requirement.requirement_name}' for university {university_id}"
        )
        return RequirementResponse.model_validate(requirement).model_dump()

    async def get_progress(
        self, application_id: str, requirement_id: str
    ) -> Optional[Dict[str, Any]]:
        progress = self._find_progress(application_id, requirement_id)
        if progress is None:
            return None
        return ProgressResponse.model_validate(progress).model_dump()

    async def list_progress(self, application_id: str) -> List[Dict[str, Any]]:
        rows = (
            self.db.execute(
                select(ApplicationRequirementProgress)
                .join(UniversityRequirement)
                .where(ApplicationRequirementProgress.application_id == application_id)
                .order_by(UniversityRequirement.order_index.asc())
            )
            .scalars()
            .all()
        )
        return [ProgressResponse.model_validate(row).model_dump() for row in rows]

    async def upsert_requirement_progress(
        self,
        application_id: str,
        requirement_id: str,
        status: RequirementStatus,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create or update the single progress row for (application, requirement).

        `completed_at` is set iff the status is completed and cleared otherwise;
        notes are only overwritten when supplied. The requirement must belong to
        the application's university.
        """
        application = self.db.get(Application, application_id)
        if not application:
            raise NotFoundError("Application not found", "APPLICATION_NOT_FOUND")

        requirement = self.db.get(UniversityRequirement, requirement_id)
        if not requirement or requirement.university_id != application.university_id:
            raise NotFoundError("Requirement not found", "REQUIREMENT_NOT_FOUND")

        values = {
            "application_id": application_id,
            "requirement_id": requirement_id,
            "status": status,
            "completed_at": utc_now() if status == RequirementStatus.COMPLETED else None,
            "notes": notes,
        }
        update_columns = ["status", "completed_at", "updated_at"]
        if notes is not None:
            update_columns.append("notes")

        try:
            upsert(
                self.db,
                ApplicationRequirementProgress,
                values,
                conflict_columns=["application_id", "requirement_id"],
                update_columns=update_columns,
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save requirement progress: {e}")
            raise DatabaseError("Failed to update requirement progress")

        logger.info(
            f"Requirement {requirement_id} on application {application_id} set to {status.value}"
        )
        return await self.get_progress(application_id, requirement_id)

    def _find_progress(
        self, application_id: str, requirement_id: str
    ) -> Optional[ApplicationRequirementProgress]:
        return self.db.execute(
            select(ApplicationRequirementProgress)
            .where(
                ApplicationRequirementProgress.application_id == application_id,
                ApplicationRequirementProgress.requirement_id == requirement_id,
            )
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()


def get_requirement_service(
    db: Session = Depends(get_sync_session),
) -> RequirementService:
    """Dependency to provide RequirementService instance"""
    return RequirementService(db)
