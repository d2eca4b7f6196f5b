# helpdesk/tickets/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from helpdesk.auth.schemas import ProfileSummary
from helpdesk.companies.schemas import CompanyOut
from helpdesk.tickets.models import TicketPriority, TicketStatus


def _not_blank(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class TicketBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)


class TicketCreate(TicketBase):
    company_id: int | None = None
    priority: TicketPriority = TicketPriority.MEDIUM

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return _not_blank(value)


class TicketUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    status: TicketStatus | None = None
    priority: TicketPriority | None = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return _not_blank(value)


class AssignmentRequest(BaseModel):
    agent_id: int


class TicketOut(TicketBase):
    id: int
    status: TicketStatus
    priority: TicketPriority
    customer_id: int
    assignee_id: int | None = None
    company_id: int | None = None
    customer: ProfileSummary
    assignee: ProfileSummary | None = None
    company: CompanyOut | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TicketBrief(BaseModel):
    id: int
    title: str
    status: TicketStatus
    priority: TicketPriority

    model_config = {"from_attributes": True}
