"""
Who may read, write or annotate an application.

Every check on an application, and transitively on its requirement progress
rows and parent notes, goes through one of the policies below. `policy_for`
picks the policy from the caller's profile, so role branching lives here
instead of in each route.
"""

from typing import Optional

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.models import Application, ParentLink, Profile, UserRole
from app.db.session import get_sync_session
from app.middlewares.auth_middleware import get_current_profile
from app.utils.errors import AuthorizationError
from app.utils.logging import get_logger
from app.utils.validators import is_valid_uuid

logger = get_logger()


def _load_application(db: Session, application_id: str) -> Optional[Application]:
    if not is_valid_uuid(application_id):
        return None
    return db.get(Application, application_id)


def is_linked(db: Session, parent_id: str, student_id: str) -> bool:
    link = db.execute(
        select(ParentLink.parent_user_id).where(
            ParentLink.parent_user_id == parent_id,
            ParentLink.student_user_id == student_id,
        )
    ).first()
    return link is not None


def can_access_application(
    db: Session, user_id: str, application_id: str, role
) -> bool:
    """
    True iff `user_id` acting as `role` may access the application.

    A student must own it; a parent must be linked to its owner. Any other
    role, a missing application, or a failed lookup gives False.
    """
    role_value = role.value if isinstance(role, UserRole) else role
    try:
        application = _load_application(db, application_id)
        if application is None:
            return False

        if role_value == UserRole.STUDENT.value:
            return application.student_id == user_id
        if role_value == UserRole.PARENT.value:
            return is_linked(db, user_id, application.student_id)
        return False
    except SQLAlchemyError as e:
        logger.warning(f"Access check failed for application {application_id}: {e}")
        return False


class AccessPolicy:
    """Base policy: every check is denied unless a subclass allows it"""

    # Restricts note listings to notes the caller wrote
    sees_only_own_notes = False

    def __init__(self, db: Session, profile: Profile):
        self.db = db
        self.profile = profile

    @property
    def user_id(self) -> str:
        return self.profile.user_id

    def can_read(self, application: Optional[Application]) -> bool:
        return False

    def can_write(self, application: Optional[Application]) -> bool:
        return False

    def can_annotate(self, application: Optional[Application]) -> bool:
        return False

    def load_for_read(self, application_id: str) -> Application:
        return self._load_checked(application_id, self.can_read)

    def load_for_write(self, application_id: str) -> Application:
        return self._load_checked(application_id, self.can_write)

    def load_for_annotate(self, application_id: str) -> Application:
        return self._load_checked(application_id, self.can_annotate)

    def _load_checked(self, application_id: str, check) -> Application:
        # A missing application is reported as no access so ids cannot be probed
        try:
            application = _load_application(self.db, application_id)
            allowed = application is not None and check(application)
        except SQLAlchemyError as e:
            logger.warning(f"Access check failed for application {application_id}: {e}")
            allowed = False

        if not allowed:
            raise AuthorizationError(
                "Access denied to this application", "APPLICATION_ACCESS_DENIED"
            )
        return application


class DenyAllPolicy(AccessPolicy):
    """Policy for profiles whose role grants no application access"""


class StudentPolicy(AccessPolicy):
    """Students read and write their own applications and never annotate"""

    def _owns(self, application: Optional[Application]) -> bool:
        return application is not None and application.student_id == self.user_id

    def can_read(self, application: Optional[Application]) -> bool:
        return self._owns(application)

    def can_write(self, application: Optional[Application]) -> bool:
        return self._owns(application)


class ParentPolicy(AccessPolicy):
    """Parents read and annotate the applications of linked students and never write"""

    sees_only_own_notes = True

    def _linked(self, application: Optional[Application]) -> bool:
        return application is not None and is_linked(
            self.db, self.user_id, application.student_id
        )

    def can_read(self, application: Optional[Application]) -> bool:
        return self._linked(application)

    def can_annotate(self, application: Optional[Application]) -> bool:
        return self._linked(application)


_POLICIES = {
    UserRole.STUDENT: StudentPolicy,
    UserRole.PARENT: ParentPolicy,
}


def policy_for(db: Session, profile: Profile) -> AccessPolicy:
    return _POLICIES.get(profile.role, DenyAllPolicy)(db, profile)


def get_access_policy(
    profile: Profile = Depends(get_current_profile),
    db: Session = Depends(get_sync_session),
) -> AccessPolicy:
    """Dependency to provide the caller's AccessPolicy"""
    return policy_for(db, profile)
