from datetime import datetime
from typing import List, Optional
from pydantic import Field, ConfigDict

from app.db.models import UserRole
from app.schemas.base_model import ApiBaseModel as BaseModel
from app.schemas.fields import UUIDStr


class ProfileSummary(BaseModel):
    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class ProfileResponse(ProfileSummary):
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpsertRequest(BaseModel):
    """Body of the legacy profile creation endpoints"""

    user_id: UUIDStr
    role: UserRole
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)


class ProfileUpdateRequest(BaseModel):
    """Settings page edits of the caller's own profile"""

    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)

    model_config = ConfigDict(extra="forbid")


class AcademicProfileRequest(BaseModel):
    graduation_year: Optional[int] = Field(None, ge=2000, le=2100)
    gpa: Optional[float] = Field(None, ge=0, le=5)
    sat_score: Optional[int] = Field(None, ge=400, le=1600)
    act_score: Optional[int] = Field(None, ge=1, le=36)
    target_countries: List[str] = Field(default_factory=list)
    intended_majors: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class AcademicProfileResponse(BaseModel):
    graduation_year: Optional[int] = None
    gpa: Optional[float] = None
    sat_score: Optional[int] = None
    act_score: Optional[int] = None
    target_countries: List[str] = Field(default_factory=list)
    intended_majors: List[str] = Field(default_factory=list)
    updated_at: Optional[datetime] = None
