# helpdesk/tickets/routes.py
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from helpdesk.auth.models import Profile, UserRole
from helpdesk.core.database import get_db
from helpdesk.core.deps import get_current_user, require_roles
from helpdesk.core.errors import NotFoundError
from helpdesk.notifications.services import notify_ticket_created
from helpdesk.realtime.broker import TicketChange, change_feed
from helpdesk.tickets import services as ticket_service
from helpdesk.tickets.models import TicketPriority, TicketStatus
from helpdesk.tickets.schemas import AssignmentRequest, TicketCreate, TicketOut, TicketUpdate

router = APIRouter(prefix="/tickets", tags=["Tickets"])


def _get_or_404(db: Session, viewer: Profile, ticket_id: int):
    ticket = ticket_service.get_visible_ticket(db, viewer, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


@router.post("/", response_model=TicketOut, status_code=201)
def create(
    ticket: TicketCreate,
    background_tasks: BackgroundTasks,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        created = ticket_service.create_ticket(db, current_user, ticket)
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    change_feed.publish(TicketChange.from_ticket("INSERT", created))
    background_tasks.add_task(notify_ticket_created, created.id)
    return created


@router.get("/", response_model=list[TicketOut])
def list_all(
    status: TicketStatus | None = Query(default=None, description="Filter by status"),
    priority: TicketPriority | None = Query(default=None, description="Filter by priority"),
    company_id: int | None = Query(default=None, description="Filter by company"),
    q: str | None = Query(default=None, description="Search title or customer name"),
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ticket_service.get_all_tickets(
        db, current_user, status=status, priority=priority, company_id=company_id, q=q
    )


@router.get("/{ticket_id}", response_model=TicketOut)
def get(ticket_id: int, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_or_404(db, current_user, ticket_id)


@router.patch("/{ticket_id}", response_model=TicketOut)
def update(
    ticket_id: int,
    ticket: TicketUpdate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    db_ticket = _get_or_404(db, current_user, ticket_id)
    try:
        updated = ticket_service.update_ticket(db, current_user, db_ticket, ticket)
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    change_feed.publish(TicketChange.from_ticket("UPDATE", updated))
    return updated


@router.put("/{ticket_id}/assignment", response_model=TicketOut)
def assign(
    ticket_id: int,
    assignment: AssignmentRequest,
    current_user: Profile = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    db_ticket = _get_or_404(db, current_user, ticket_id)
    try:
        updated, previous = ticket_service.assign_agent(db, current_user, db_ticket, assignment.agent_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    change_feed.publish(TicketChange.from_ticket("UPDATE", updated, previous_assignee_id=previous))
    return updated


@router.delete("/{ticket_id}/assignment", response_model=TicketOut)
def unassign(
    ticket_id: int,
    current_user: Profile = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    db_ticket = _get_or_404(db, current_user, ticket_id)
    previous = ticket_service.unassign_agent(db, db_ticket)
    change_feed.publish(TicketChange.from_ticket("UPDATE", db_ticket, previous_assignee_id=previous))
    return db_ticket


@router.delete("/{ticket_id}", status_code=204)
def delete(
    ticket_id: int,
    current_user: Profile = Depends(require_roles(UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    db_ticket = _get_or_404(db, current_user, ticket_id)
    change = TicketChange.from_ticket("DELETE", db_ticket)
    ticket_service.delete_ticket(db, db_ticket)
    change_feed.publish(change)
    return Response(status_code=204)
