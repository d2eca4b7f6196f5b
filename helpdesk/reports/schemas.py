# helpdesk/reports/schemas.py
from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_tickets: int
    open_tickets: int
    in_progress_tickets: int
    closed_tickets: int


class NamedCount(BaseModel):
    name: str
    value: int


class ReportSummary(BaseModel):
    by_status: list[NamedCount]
    by_priority: list[NamedCount]
    avg_response_time_hours: int


class AgentPerformance(BaseModel):
    agent_id: int
    agent_name: str | None = None
    total_tickets: int
    open_tickets: int
    in_progress_tickets: int
    resolved_tickets: int
    avg_resolution_time_hours: int
    avg_rating: float
    resolution_rate: int
