# helpdesk/tickets/services.py
import enum
import logging

from sqlalchemy import false, or_
from sqlalchemy.orm import Query, Session, joinedload

from helpdesk.auth.models import Profile, UserRole
from helpdesk.companies.models import Company
from helpdesk.core.database import utcnow
from helpdesk.core.errors import NotFoundError
from helpdesk.tickets.models import Ticket, TicketAssignment, TicketPriority, TicketStatus
from helpdesk.tickets.schemas import TicketCreate, TicketUpdate

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = frozenset({"title", "description"})
AGENT_FIELDS = frozenset({"status", "priority"})
ADMIN_FIELDS = CUSTOMER_FIELDS | AGENT_FIELDS


def can_view(viewer, ticket) -> bool:
    """Role-based visibility shared by reads, reports and the change feed.

    Works on anything carrying ``id``/``role``/``company_id`` (viewer) and
    ``customer_id``/``assignee_id``/``company_id`` (ticket).
    """
    if viewer.role == UserRole.CUSTOMER.value:
        return ticket.customer_id == viewer.id
    if viewer.role == UserRole.AGENT.value:
        return ticket.assignee_id == viewer.id
    if viewer.role == UserRole.ADMIN.value:
        return viewer.company_id is not None and ticket.company_id == viewer.company_id
    return False


def visible_tickets(db: Session, viewer: Profile) -> Query:
    query = db.query(Ticket)
    if viewer.role == UserRole.CUSTOMER.value:
        return query.filter(Ticket.customer_id == viewer.id)
    if viewer.role == UserRole.AGENT.value:
        return query.filter(Ticket.assignee_id == viewer.id)
    if viewer.role == UserRole.ADMIN.value and viewer.company_id is not None:
        return query.filter(Ticket.company_id == viewer.company_id)
    return query.filter(false())


def _contains_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def get_all_tickets(
    db: Session,
    viewer: Profile,
    status: TicketStatus | None = None,
    priority: TicketPriority | None = None,
    company_id: int | None = None,
    q: str | None = None,
) -> list[Ticket]:
    query = visible_tickets(db, viewer).options(
        joinedload(Ticket.customer),
        joinedload(Ticket.assignee),
        joinedload(Ticket.company),
    )
    if status:
        query = query.filter(Ticket.status == status.value)
    if priority:
        query = query.filter(Ticket.priority == priority.value)
    if company_id is not None:
        query = query.filter(Ticket.company_id == company_id)
    if q and q.strip():
        pattern = _contains_pattern(q.strip())
        query = query.join(Profile, Ticket.customer_id == Profile.id).filter(
            or_(
                Ticket.title.ilike(pattern, escape="\\"),
                Profile.full_name.ilike(pattern, escape="\\"),
            )
        )
    return query.order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()


def get_ticket(db: Session, ticket_id: int) -> Ticket | None:
    return db.query(Ticket).filter(Ticket.id == ticket_id).first()


def get_visible_ticket(db: Session, viewer: Profile, ticket_id: int) -> Ticket | None:
    ticket = get_ticket(db, ticket_id)
    if ticket is None or not can_view(viewer, ticket):
        return None
    return ticket


def create_ticket(db: Session, customer: Profile, payload: TicketCreate) -> Ticket:
    if customer.role != UserRole.CUSTOMER.value:
        raise PermissionError("Only customers can create tickets")

    company_id = customer.company_id
    if payload.company_id is not None:
        if db.query(Company).filter(Company.id == payload.company_id).first() is None:
            raise NotFoundError("Company not found")
        company_id = payload.company_id

    db_ticket = Ticket(
        title=payload.title,
        description=payload.description,
        status=TicketStatus.OPEN.value,
        priority=payload.priority.value,
        customer_id=customer.id,
        company_id=company_id,
    )
    db.add(db_ticket)
    db.commit()
    db.refresh(db_ticket)
    logger.info("Ticket %s created by %s (company=%s)", db_ticket.id, customer.id, company_id)
    return db_ticket


def editable_fields(viewer: Profile, ticket: Ticket) -> frozenset:
    if viewer.role == UserRole.CUSTOMER.value and ticket.customer_id == viewer.id:
        return CUSTOMER_FIELDS
    if viewer.role == UserRole.AGENT.value and ticket.assignee_id == viewer.id:
        return AGENT_FIELDS
    if viewer.role == UserRole.ADMIN.value and can_view(viewer, ticket):
        return ADMIN_FIELDS
    return frozenset()


def update_ticket(db: Session, viewer: Profile, ticket: Ticket, payload: TicketUpdate) -> Ticket:
    # an explicit null never clears a column
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    forbidden = set(changes) - editable_fields(viewer, ticket)
    if forbidden:
        raise PermissionError(f"Not allowed to change: {', '.join(sorted(forbidden))}")

    for field, value in changes.items():
        setattr(ticket, field, value.value if isinstance(value, enum.Enum) else value)
    db.commit()
    db.refresh(ticket)
    if changes:
        logger.info("Ticket %s updated by %s: %s", ticket.id, viewer.id, sorted(changes))
    return ticket


def assign_agent(db: Session, admin: Profile, ticket: Ticket, agent_id: int) -> tuple[Ticket, int | None]:
    """Point the ticket at ``agent_id``; returns the ticket and the previous assignee."""
    agent = db.query(Profile).filter(Profile.id == agent_id).first()
    if agent is None:
        raise NotFoundError("Agent not found")
    if agent.role != UserRole.AGENT.value:
        raise ValueError("Selected user is not an agent")
    if agent.company_id != admin.company_id:
        raise ValueError("Agent does not belong to your company")

    previous = ticket.assignee_id
    ticket.assignee_id = agent.id
    if ticket.assignment is None:
        ticket.assignment = TicketAssignment(agent_id=agent.id, assigned_by=admin.id)
    else:
        ticket.assignment.agent_id = agent.id
        ticket.assignment.assigned_by = admin.id
        ticket.assignment.assigned_at = utcnow()
    db.commit()
    db.refresh(ticket)
    logger.info("Ticket %s assigned to agent %s by %s", ticket.id, agent.id, admin.id)
    return ticket, previous


def unassign_agent(db: Session, ticket: Ticket) -> int | None:
    previous = ticket.assignee_id
    ticket.assignee_id = None
    ticket.assignment = None
    db.commit()
    db.refresh(ticket)
    logger.info("Ticket %s unassigned (was %s)", ticket.id, previous)
    return previous


def delete_ticket(db: Session, ticket: Ticket) -> None:
    ticket_id = ticket.id
    db.delete(ticket)
    db.commit()
    logger.info("Ticket %s deleted", ticket_id)
