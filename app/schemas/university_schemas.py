from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import Field, ConfigDict

from app.db.models import RequirementStatus
from app.schemas.base_model import ApiBaseModel as BaseModel


class UniversitySummary(BaseModel):
    """University fields shown next to an application"""

    id: str
    name: str
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    location: Optional[str] = Field(None, description="City, state and country")
    us_news_ranking: Optional[int] = None
    acceptance_rate: Optional[float] = None


class UniversityResponse(UniversitySummary):
    """Full university projection"""

    tuition_in_state: Optional[float] = None
    tuition_out_state: Optional[float] = None
    application_fee: Optional[float] = None
    application_system: Optional[str] = None
    deadlines: Optional[Dict[str, Any]] = None
    programs: List[str] = Field(default_factory=list)


SortField = Literal["name", "ranking", "acceptance_rate", "tuition_fees"]
SortOrder = Literal["asc", "desc"]


class UniversitySearchParams(BaseModel):
    """Query parameters of GET /universities"""

    q: Optional[str] = Field(None, max_length=200, description="Name contains (case-insensitive)")
    country: Optional[str] = Field(None, max_length=100)
    ranking_min: Optional[float] = Field(None, ge=1)
    ranking_max: Optional[float] = Field(None, ge=1)
    acceptance_rate_min: Optional[float] = Field(None, ge=0, le=100)
    acceptance_rate_max: Optional[float] = Field(None, ge=0, le=100)
    tuition_min: Optional[float] = Field(None, ge=0)
    tuition_max: Optional[float] = Field(None, ge=0)
    program: Optional[str] = Field(None, max_length=200)
    limit: Optional[int] = Field(None, description="Page size, clamped to 1..100")
    offset: int = Field(0, ge=0)
    sort_by: SortField = "name"
    sort_order: SortOrder = "asc"

    model_config = ConfigDict(extra="ignore")

    def applied_filters(self) -> Dict[str, Any]:
        """Filters that were actually supplied, echoed back in the envelope"""
        return self.model_dump(
            exclude_none=True, exclude={"limit", "offset", "sort_by", "sort_order"}
        )


class RequirementCreateRequest(BaseModel):
    requirement_type: str = Field(..., min_length=1, max_length=100)
    requirement_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    is_required: bool = True
    order_index: int = Field(0, ge=0)

    model_config = ConfigDict(extra="forbid")


class ProgressResponse(BaseModel):
    """A requirement progress row for one application"""

    id: str
    application_id: str
    requirement_id: str
    status: RequirementStatus
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RequirementResponse(BaseModel):
    id: str
    university_id: str
    requirement_type: str
    requirement_name: str
    description: Optional[str] = None
    is_required: bool
    order_index: int


class RequirementWithProgressResponse(RequirementResponse):
    # Empty when the application has no progress row for the requirement yet
    application_requirement_progress: List[ProgressResponse] = Field(
        default_factory=list
    )
