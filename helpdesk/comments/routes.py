# helpdesk/comments/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from helpdesk.auth.models import Profile
from helpdesk.comments import services as comment_service
from helpdesk.comments.schemas import CommentCreate, CommentOut
from helpdesk.core.database import get_db
from helpdesk.core.deps import get_current_user
from helpdesk.tickets import services as ticket_service

router = APIRouter(prefix="/tickets/{ticket_id}/comments", tags=["Comments"])


@router.get("/", response_model=list[CommentOut])
def list_all(ticket_id: int, current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    if not ticket_service.get_visible_ticket(db, current_user, ticket_id):
        raise HTTPException(status_code=404, detail="Ticket not found")
    return [comment_service.to_out(c) for c in comment_service.get_comments(db, ticket_id)]


@router.post("/", response_model=CommentOut, status_code=201)
def create(
    ticket_id: int,
    comment: CommentCreate,
    current_user: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not ticket_service.get_visible_ticket(db, current_user, ticket_id):
        raise HTTPException(status_code=404, detail="Ticket not found")
    created = comment_service.add_comment(db, current_user, ticket_id, comment)
    return comment_service.to_out(created)
