# helpdesk/feedback/services.py
import logging

from sqlalchemy.orm import Session

from helpdesk.auth.models import Profile
from helpdesk.core.errors import ConflictError
from helpdesk.feedback.models import Feedback
from helpdesk.feedback.schemas import FeedbackCreate
from helpdesk.tickets.models import Ticket, TicketStatus

logger = logging.getLogger(__name__)


def get_feedback(db: Session, ticket_id: int) -> list[Feedback]:
    return db.query(Feedback).filter(Feedback.ticket_id == ticket_id).order_by(Feedback.created_at).all()


def leave_feedback(db: Session, customer: Profile, ticket: Ticket, payload: FeedbackCreate) -> Feedback:
    if ticket.customer_id != customer.id:
        raise PermissionError("Only the customer who filed the ticket can rate it")
    if ticket.status != TicketStatus.CLOSED.value:
        raise ValueError("Feedback can only be left on closed tickets")
    existing = (
        db.query(Feedback)
        .filter(Feedback.ticket_id == ticket.id, Feedback.user_id == customer.id)
        .first()
    )
    if existing:
        raise ConflictError("Feedback already submitted for this ticket")

    comment = payload.comment.strip() if payload.comment else None
    feedback = Feedback(ticket_id=ticket.id, user_id=customer.id, rating=payload.rating, comment=comment or None)
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    logger.info("Ticket %s rated %s by %s", ticket.id, payload.rating, customer.id)
    return feedback
