# helpdesk/feedback/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from helpdesk.auth.models import Profile
from helpdesk.core.database import get_db
from helpdesk.core.deps import get_current_user
from helpdesk.core.errors import ConflictError
from helpdesk.feedback import services as feedback_service
from helpdesk.feedback.schemas import FeedbackCreate, FeedbackOut
from helpdesk.tickets import services as ticket_service

router = APIRouter(prefix="/tickets/{ticket_id}/feedback", tags=["Feedback"])


@router.get("/", response_model=list[FeedbackOut])
def list_all(ticket_id: int, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    if not ticket_service.get_visible_ticket(db, current_user, ticket_id):
        raise HTTPException(status_code=404, detail="Ticket not found")
    return feedback_service.get_feedback(db, ticket_id)


@router.post("/", response_model=FeedbackOut, status_code=201)
def create(
    ticket_id: int,
    feedback: FeedbackCreate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ticket = ticket_service.get_visible_ticket(db, current_user, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    try:
        return feedback_service.leave_feedback(db, current_user, ticket, feedback)
    except PermissionError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
