# helpdesk/people/schemas.py
from datetime import datetime

from pydantic import BaseModel

from helpdesk.tickets.schemas import TicketBrief


class AgentOut(BaseModel):
    id: int
    email: str
    full_name: str | None = None
    tickets: list[TicketBrief] = []


class CustomerOut(BaseModel):
    id: int
    email: str
    full_name: str | None = None
    company_id: int | None = None
    company_name: str | None = None
    created_at: datetime
