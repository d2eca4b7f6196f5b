# helpdesk/reports/services.py
"""Aggregates over already-fetched ticket rows.

The counts are computed in Python over the rows a viewer may see rather
than in SQL, so the dashboard, the admin reports and the agent metrics
all go through the same visibility rule as the ticket list.
"""
import math
from collections import Counter

from sqlalchemy.orm import Session

from helpdesk.auth.models import Profile, UserRole
from helpdesk.feedback.models import Feedback
from helpdesk.tickets.models import Ticket, TicketPriority, TicketStatus
from helpdesk.tickets.services import visible_tickets

SECONDS_PER_HOUR = 60 * 60


def _round_half_up(value: float) -> int:
    # halves round up: 2.5 -> 3
    return math.floor(value + 0.5)


def _mean_hours(tickets: list[Ticket]) -> int:
    spans = [
        (t.updated_at - t.created_at).total_seconds()
        for t in tickets
        if t.created_at and t.updated_at
    ]
    if not spans:
        return 0
    return _round_half_up(sum(spans) / len(spans) / SECONDS_PER_HOUR)


def dashboard_stats(db: Session, viewer: Profile) -> dict:
    counts = Counter(t.status or TicketStatus.OPEN.value for t in visible_tickets(db, viewer).all())
    return {
        "total_tickets": sum(counts.values()),
        "open_tickets": counts[TicketStatus.OPEN.value],
        "in_progress_tickets": counts[TicketStatus.IN_PROGRESS.value],
        "closed_tickets": counts[TicketStatus.CLOSED.value],
    }


def report_summary(db: Session, admin: Profile) -> dict:
    tickets = visible_tickets(db, admin).all()
    by_status = Counter(t.status for t in tickets)
    by_priority = Counter(t.priority for t in tickets)
    return {
        "by_status": [{"name": s.value, "value": by_status[s.value]} for s in TicketStatus],
        "by_priority": [{"name": p.value, "value": by_priority[p.value]} for p in TicketPriority],
        "avg_response_time_hours": _mean_hours(tickets),
    }


def agent_performance(db: Session, agent: Profile) -> dict:
    tickets = db.query(Ticket).filter(Ticket.assignee_id == agent.id).all()
    counts = Counter(t.status for t in tickets)
    resolved = [t for t in tickets if t.status == TicketStatus.CLOSED.value]

    ratings = [
        rating
        for (rating,) in db.query(Feedback.rating)
        .join(Ticket, Feedback.ticket_id == Ticket.id)
        .filter(Ticket.assignee_id == agent.id)
        .all()
    ]
    total = len(tickets)
    return {
        "agent_id": agent.id,
        "agent_name": agent.full_name,
        "total_tickets": total,
        "open_tickets": counts[TicketStatus.OPEN.value],
        "in_progress_tickets": counts[TicketStatus.IN_PROGRESS.value],
        "resolved_tickets": len(resolved),
        "avg_resolution_time_hours": _mean_hours(resolved),
        "avg_rating": round(sum(ratings) / len(ratings), 1) if ratings else 0.0,
        "resolution_rate": _round_half_up(len(resolved) * 100 / total) if total else 0,
    }


def company_agent_performance(db: Session, company_id: int) -> list[dict]:
    agents = (
        db.query(Profile)
        .filter(Profile.role == UserRole.AGENT.value, Profile.company_id == company_id)
        .order_by(Profile.id)
        .all()
    )
    return [agent_performance(db, agent) for agent in agents]
