# helpdesk/comments/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from helpdesk.auth.models import UserRole


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Comment must not be blank")
        return value


class CommentAuthor(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole


class CommentOut(BaseModel):
    id: int
    ticket_id: int
    content: str
    user: CommentAuthor
    created_at: datetime
