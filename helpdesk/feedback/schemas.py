# helpdesk/feedback/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str | None = None


class FeedbackOut(BaseModel):
    id: int
    ticket_id: int
    user_id: int
    rating: int
    comment: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}
