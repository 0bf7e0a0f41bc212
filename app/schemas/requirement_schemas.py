from typing import Optional
from pydantic import Field, ConfigDict

from app.db.models import RequirementStatus
from app.schemas.base_model import ApiBaseModel as BaseModel
from app.schemas.fields import UUIDStr


class ProgressUpdateRequest(BaseModel):
    """Body of PUT /applications/{id}/requirements/{requirement_id}"""

    status: RequirementStatus = Field(
        ..., description="not_started, in_progress or completed"
    )
    notes: Optional[str] = Field(
        None, max_length=1000, description="Left unchanged when omitted"
    )

    model_config = ConfigDict(extra="forbid")


class ProgressUpsertRequest(ProgressUpdateRequest):
    """Body of POST /applications/{id}/requirements"""

    requirement_id: UUIDStr
