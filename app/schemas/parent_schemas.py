from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, Field, ConfigDict

from app.schemas.base_model import ApiBaseModel as BaseModel
from app.schemas.fields import UUIDStr
from app.schemas.profile_schemas import AcademicProfileResponse, ProfileSummary
from app.schemas.storage_schemas import StudentFilesResponse


class LinkStudentRequest(BaseModel):
    # The web client sends camelCase, older callers snake_case
    student_id: UUIDStr = Field(
        ..., validation_alias=AliasChoices("studentId", "student_id")
    )


class LinkParentRequest(BaseModel):
    parent_id: UUIDStr = Field(
        ..., validation_alias=AliasChoices("parentId", "parent_id")
    )


class EmailSearchRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)


class ParentNoteCreateRequest(BaseModel):
    application_id: UUIDStr
    note: str = Field(..., max_length=2000)

    model_config = ConfigDict(extra="forbid")


class ParentNoteResponse(BaseModel):
    id: str
    application_id: str
    parent_user_id: str
    note: str
    created_at: datetime
    # Author's name, included on the student's view
    parent: Optional[ProfileSummary] = None


class ParentNotificationItem(BaseModel):
    """One of the parent's own recent notes, labelled with the student it concerns"""

    id: str
    application_id: str
    note: str
    created_at: datetime
    student: Optional[ProfileSummary] = None
    university_name: Optional[str] = None


class LinkedStudentResponse(ProfileSummary):
    linked_at: Optional[datetime] = None


class LinkedParentResponse(ProfileSummary):
    linked_at: Optional[datetime] = None


class ParentSearchResponse(ProfileSummary):
    is_linked: bool = False


class StudentProfileView(ProfileSummary):
    """What a linked parent sees about a student"""

    academic_profile: Optional[AcademicProfileResponse] = None
    files: StudentFilesResponse = Field(default_factory=StudentFilesResponse)
