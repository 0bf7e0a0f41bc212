from datetime import date, datetime
from typing import Optional
from pydantic import Field, ConfigDict, field_validator

from app.db.models import ApplicationStatus, ApplicationType
from app.schemas.base_model import ApiBaseModel as BaseModel
from app.schemas.fields import DateValue, UUIDStr
from app.schemas.university_schemas import UniversityResponse, UniversitySummary


class ApplicationCreateRequest(BaseModel):
    """Body of POST /applications"""

    university_id: UUIDStr = Field(..., description="University to apply to")
    application_type: Optional[ApplicationType] = Field(
        None, description="Early_Decision, Early_Action, Regular_Decision or Rolling_Admission"
    )
    deadline: Optional[DateValue] = Field(None, description="Application deadline")
    notes: Optional[str] = Field(None, max_length=1000)

    model_config = ConfigDict(extra="forbid")


class ApplicationUpdateRequest(BaseModel):
    """
    Partial update of an application.

    Only the fields present in the body are written; an explicit `null`
    clears the column, except for `status` which cannot be null.
    Status transitions are not enforced here.
    """

    status: Optional[ApplicationStatus] = None
    application_type: Optional[ApplicationType] = None
    deadline: Optional[DateValue] = None
    submitted_date: Optional[DateValue] = None
    decision_date: Optional[DateValue] = None
    decision_type: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=1000)

    model_config = ConfigDict(extra="forbid")

    @field_validator("status")
    @classmethod
    def status_not_null(cls, value):
        if value is None:
            raise ValueError("status cannot be null")
        return value


class ApplicationResponse(BaseModel):
    """Application row joined with a university summary"""

    id: str
    student_id: str
    university_id: str
    application_type: Optional[ApplicationType] = None
    deadline: Optional[date] = None
    status: ApplicationStatus
    submitted_date: Optional[date] = None
    decision_date: Optional[date] = None
    decision_type: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    university: Optional[UniversitySummary] = None


class ApplicationDetailResponse(ApplicationResponse):
    """Application row with the full university projection"""

    university: Optional[UniversityResponse] = None

