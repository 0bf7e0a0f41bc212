from typing import List, Optional
from datetime import datetime, date
from sqlalchemy import (
    String,
    Boolean,
    Integer,
    Float,
    Text,
    ForeignKey,
    Enum,
    Index,
    JSON,
    UniqueConstraint,
    CheckConstraint,
    DateTime,
    Date,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
import enum

from app.db.custom_types import StringUUID, new_uuid
from app.utils.datetime_utils import utc_now


class Base(DeclarativeBase):
    pass


# Enums
class UserRole(enum.Enum):
    STUDENT = "student"
    PARENT = "parent"


class ApplicationStatus(enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WAITLISTED = "WAITLISTED"


DECISION_STATUSES = (
    ApplicationStatus.ACCEPTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WAITLISTED,
)


class ApplicationType(enum.Enum):
    EARLY_DECISION = "Early_Decision"
    EARLY_ACTION = "Early_Action"
    REGULAR_DECISION = "Regular_Decision"
    ROLLING_ADMISSION = "Rolling_Admission"


class RequirementStatus(enum.Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# Base model with common audit fields
class AuditMixin:
    """Mixin for common audit fields"""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


# Models
class Profile(Base, AuditMixin):
    __tablename__ = "profiles"

    # Equals the identity provider's subject id
    user_id: Mapped[str] = mapped_column(StringUUID, primary_key=True)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))
    email: Mapped[Optional[str]] = mapped_column(String(255))

    # Relationships
    applications: Mapped[List["Application"]] = relationship(
        back_populates="student", cascade="all, delete-orphan"
    )
    student_profile: Mapped[Optional["StudentProfile"]] = relationship(
        back_populates="profile", cascade="all, delete-orphan"
    )

    # Constraints
    __table_args__ = (
        Index("idx_profiles_email", "email"),
        Index("idx_profiles_role", "role"),
    )

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class University(Base, AuditMixin):
    __tablename__ = "universities"

    id: Mapped[str] = mapped_column(StringUUID, primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(100))
    state: Mapped[Optional[str]] = mapped_column(String(100))
    country: Mapped[Optional[str]] = mapped_column(String(100))
    us_news_ranking: Mapped[Optional[int]] = mapped_column(Integer)
    acceptance_rate: Mapped[Optional[float]] = mapped_column(Float)
    tuition_in_state: Mapped[Optional[float]] = mapped_column(Float)
    tuition_out_state: Mapped[Optional[float]] = mapped_column(Float)
    application_fee: Mapped[Optional[float]] = mapped_column(Float)
    application_system: Mapped[Optional[str]] = mapped_column(String(100))
    # {"regular": "2025-01-01", "early_decision": "2024-11-01", ...}
    deadlines: Mapped[Optional[dict]] = mapped_column(JSON)
    programs: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)

    # Relationships
    requirements: Mapped[List["UniversityRequirement"]] = relationship(
        back_populates="university",
        cascade="all, delete-orphan",
        order_by="UniversityRequirement.order_index",
    )
    applications: Mapped[List["Application"]] = relationship(
        back_populates="university"
    )

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "acceptance_rate IS NULL OR (acceptance_rate >= 0 AND acceptance_rate <= 100)",
            name="ck_universities_acceptance_rate_range",
        ),
        Index("idx_universities_name", "name"),
        Index("idx_universities_country", "country"),
        Index("idx_universities_ranking", "us_news_ranking"),
    )

    @property
    def location(self) -> str:
        return ", ".join(p for p in (self.city, self.state, self.country) if p)


class Application(Base, AuditMixin):
    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(StringUUID, primary_key=True, default=new_uuid)
    student_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False
    )
    university_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("universities.id"), nullable=False
    )
    application_type: Mapped[Optional[ApplicationType]] = mapped_column(
        Enum(ApplicationType)
    )
    deadline: Mapped[Optional[date]] = mapped_column(Date)
    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(ApplicationStatus), default=ApplicationStatus.NOT_STARTED, nullable=False
    )
    submitted_date: Mapped[Optional[date]] = mapped_column(Date)
    decision_date: Mapped[Optional[date]] = mapped_column(Date)
    decision_type: Mapped[Optional[str]] = mapped_column(String(50))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    student: Mapped["Profile"] = relationship(back_populates="applications")
    university: Mapped["University"] = relationship(back_populates="applications")
    requirement_progress: Mapped[List["ApplicationRequirementProgress"]] = (
        relationship(back_populates="application", cascade="all, delete-orphan")
    )
    parent_notes: Mapped[List["ParentNote"]] = relationship(
        back_populates="application", cascade="all, delete-orphan"
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint(
            "student_id", "university_id", name="uq_applications_student_university"
        ),
        Index("idx_applications_student", "student_id"),
        Index("idx_applications_deadline", "deadline"),
        Index("idx_applications_status", "status"),
    )


class UniversityRequirement(Base, AuditMixin):
    __tablename__ = "university_requirements"

    id: Mapped[str] = mapped_column(StringUUID, primary_key=True, default=new_uuid)
    university_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("universities.id", ondelete="CASCADE"), nullable=False
    )
    requirement_type: Mapped[str] = mapped_column(String(100), nullable=False)
    requirement_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    is_required: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    university: Mapped["University"] = relationship(back_populates="requirements")
    progress: Mapped[List["ApplicationRequirementProgress"]] = relationship(
        back_populates="requirement", cascade="all, delete-orphan"
    )

    # Constraints
    __table_args__ = (
        Index("idx_university_requirements_university", "university_id", "order_index"),
    )


class ApplicationRequirementProgress(Base, AuditMixin):
    __tablename__ = "application_requirement_progress"

    id: Mapped[str] = mapped_column(StringUUID, primary_key=True, default=new_uuid)
    application_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    requirement_id: Mapped[str] = mapped_column(
        StringUUID,
        ForeignKey("university_requirements.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[RequirementStatus] = mapped_column(
        Enum(RequirementStatus), default=RequirementStatus.NOT_STARTED, nullable=False
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships
    application: Mapped["Application"] = relationship(
        back_populates="requirement_progress"
    )
    requirement: Mapped["UniversityRequirement"] = relationship(
        back_populates="progress"
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint(
            "application_id",
            "requirement_id",
            name="uq_requirement_progress_application_requirement",
        ),
    )


class ParentLink(Base):
    __tablename__ = "parent_links"

    parent_user_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("profiles.user_id", ondelete="CASCADE"), primary_key=True
    )
    student_user_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("profiles.user_id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    # Relationships
    parent: Mapped["Profile"] = relationship(foreign_keys=[parent_user_id])
    student: Mapped["Profile"] = relationship(foreign_keys=[student_user_id])

    # Constraints
    __table_args__ = (Index("idx_parent_links_student", "student_user_id"),)


class ParentNote(Base):
    __tablename__ = "parent_notes"

    id: Mapped[str] = mapped_column(StringUUID, primary_key=True, default=new_uuid)
    application_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    parent_user_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("profiles.user_id", ondelete="CASCADE"), nullable=False
    )
    note: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    # Relationships
    application: Mapped["Application"] = relationship(back_populates="parent_notes")
    parent: Mapped["Profile"] = relationship()

    # Constraints
    __table_args__ = (
        Index("idx_parent_notes_application", "application_id", "created_at"),
        Index("idx_parent_notes_parent", "parent_user_id"),
    )


class StudentProfile(Base, AuditMixin):
    __tablename__ = "student_profile"

    user_id: Mapped[str] = mapped_column(
        StringUUID, ForeignKey("profiles.user_id", ondelete="CASCADE"), primary_key=True
    )
    graduation_year: Mapped[Optional[int]] = mapped_column(Integer)
    gpa: Mapped[Optional[float]] = mapped_column(Float)
    sat_score: Mapped[Optional[int]] = mapped_column(Integer)
    act_score: Mapped[Optional[int]] = mapped_column(Integer)
    target_countries: Mapped[List[str]] = mapped_column(
        JSON, default=list, nullable=False
    )
    intended_majors: Mapped[List[str]] = mapped_column(
        JSON, default=list, nullable=False
    )

    # Relationships
    profile: Mapped["Profile"] = relationship(back_populates="student_profile")

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "gpa IS NULL OR (gpa >= 0 AND gpa <= 5)", name="ck_student_profile_gpa_range"
        ),
    )
