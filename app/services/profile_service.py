from typing import Any, Dict, Optional

from fastapi import Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.utils.logging import get_logger
from app.utils.errors import AuthorizationError, DatabaseError, NotFoundError
from app.db.models import Profile, StudentProfile, UserRole
from app.db.session import get_sync_session
from app.db.upsert import upsert
from app.schemas.profile_schemas import (
    AcademicProfileRequest,
    AcademicProfileResponse,
    ProfileResponse,
    ProfileSummary,
    ProfileUpdateRequest,
    ProfileUpsertRequest,
)

logger = get_logger()


class ProfileService:
    """Service provider for user profiles and students' academic profiles"""

    def __init__(self, db_session: Session):
        self.db = db_session

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        return self.db.get(Profile, user_id)

    async def upsert_profile(
        self,
        user_id: str,
        role: UserRole,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create the profile for `user_id`, or overwrite it when it already exists"""
        values = {
            "user_id": user_id,
            "role": role,
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
        }
        try:
            upsert(
                self.db,
                Profile,
                values,
                conflict_columns=["user_id"],
                update_columns=["role", "first_name", "last_name", "email", "updated_at"],
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save profile {user_id}: {e}")
            raise DatabaseError("Failed to create profile")

        logger.info(f"Saved profile {user_id} with role {role.value}")
        return await self.get_profile_response(user_id)

    async def save_own_profile(
        self,
        caller_id: str,
        data: ProfileUpsertRequest,
        existing_role: Optional[UserRole] = None,
    ) -> Dict[str, Any]:
        """
        Upsert the caller's own profile for the profile creation endpoints.

        With `existing_role`, a caller whose profile already exists must hold
        that role.
        """
        if data.user_id != caller_id:
            raise AuthorizationError(
                "You can only create your own profile", "PROFILE_USER_MISMATCH"
            )

        if existing_role is not None:
            existing = await self.get_profile(caller_id)
            if existing and existing.role != existing_role:
                raise AuthorizationError(
                    f"Access denied. {existing_role.value} role required.",
                    "ROLE_REQUIRED",
                )

        return await self.upsert_profile(
            user_id=caller_id,
            role=data.role,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
        )

    async def get_profile_response(self, user_id: str) -> Dict[str, Any]:
        profile = self.db.get(Profile, user_id, populate_existing=True)
        if not profile:
            raise NotFoundError("Profile not found", "PROFILE_NOT_FOUND")
        return ProfileResponse.model_validate(profile).model_dump()

    async def update_profile(
        self, profile: Profile, changes: ProfileUpdateRequest
    ) -> Dict[str, Any]:
        """Apply the settings page's edits (names and email) to the caller's profile"""
        for field, value in changes.model_dump(exclude_unset=True).items():
            setattr(profile, field, value)

        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update profile {profile.user_id}: {e}")
            raise DatabaseError("Failed to update profile")

        logger.info(f"Updated profile {profile.user_id}")
        return ProfileResponse.model_validate(profile).model_dump()

    async def get_student_summary(self, student_id: str) -> Dict[str, Any]:
        profile = self.db.get(Profile, student_id)
        if not profile:
            raise NotFoundError("Student profile not found", "STUDENT_NOT_FOUND")
        return ProfileSummary.model_validate(profile).model_dump()

    async def get_academic_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        academic = self.db.get(StudentProfile, user_id, populate_existing=True)
        if academic is None:
            return None
        return AcademicProfileResponse.model_validate(academic).model_dump()

    async def upsert_academic_profile(
        self, user_id: str, data: AcademicProfileRequest
    ) -> Dict[str, Any]:
        values = {"user_id": user_id, **data.model_dump()}
        try:
            upsert(
                self.db,
                StudentProfile,
                values,
                conflict_columns=["user_id"],
                update_columns=[*data.model_dump().keys(), "updated_at"],
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save academic profile {user_id}: {e}")
            raise DatabaseError("Failed to save academic profile")

        logger.info(f"Saved academic profile for {user_id}")
        return await self.get_academic_profile(user_id)


def get_profile_service(
    db: Session = Depends(get_sync_session),
) -> ProfileService:
    """Dependency to provide ProfileService instance"""
    return ProfileService(db)
