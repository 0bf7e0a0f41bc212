import datetime as dt
from typing import Literal, Optional, Union
from pydantic import Field

from app.schemas.base_model import ApiBaseModel as BaseModel


class NotificationItem(BaseModel):
    """A notification derived on demand from deadlines and parent notes"""

    id: str = Field(..., description="dl-{application_id}-{days} or pn-{note_id}")
    type: Literal["deadline", "parent"]
    title: str
    message: str
    date: Union[dt.datetime, dt.date] = Field(
        ..., description="Deadline for deadline items, note time for parent items"
    )
    application_id: Optional[str] = None
