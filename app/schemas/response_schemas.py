from datetime import datetime, timezone
from typing import Any, Dict, Optional, List
import uuid

from pydantic import Field

from app.schemas.base_model import ApiBaseModel as BaseModel


class PaginationMeta(BaseModel):
    """Offset/limit pagination metadata"""

    total: int = Field(..., description="Total number of matching items")
    limit: int = Field(..., description="Page size that was applied")
    offset: int = Field(..., description="Offset that was applied")
    has_more: bool = Field(..., description="Whether more items exist after this page")


class FiltersMeta(BaseModel):
    applied: Dict[str, Any] = Field(default_factory=dict)


class ApiResponse(BaseModel):
    """Standardized API response envelope"""

    success: bool = Field(..., description="Whether the request was successful")
    message: Optional[str] = Field(default=None, description="Human-readable message")
    data: Optional[Any] = Field(default=None, description="Response data")
    pagination: Optional[PaginationMeta] = Field(
        default=None, description="Pagination information"
    )
    filters: Optional[FiltersMeta] = Field(default=None, description="Applied filters")
    unread: Optional[int] = Field(default=None, description="Unread item count")
    error: Optional[str] = Field(default=None, description="Error message")
    code: Optional[str] = Field(default=None, description="Machine-readable error code")
    errors: Optional[List[Dict[str, Any]]] = Field(
        default=None, description="Error details"
    )
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )
    request_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique request identifier",
    )
    path: Optional[str] = Field(default=None, description="Request path")
