# helpdesk/comments/services.py
import logging

from sqlalchemy.orm import Session, joinedload

from helpdesk.auth.models import Profile
from helpdesk.comments.models import Comment
from helpdesk.comments.schemas import CommentCreate

logger = logging.getLogger(__name__)


def get_comments(db: Session, ticket_id: int) -> list[Comment]:
    return (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.ticket_id == ticket_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )


def add_comment(db: Session, author: Profile, ticket_id: int, payload: CommentCreate) -> Comment:
    comment = Comment(ticket_id=ticket_id, user_id=author.id, content=payload.content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s added to ticket %s by %s", comment.id, ticket_id, author.id)
    return comment


def to_out(comment: Comment) -> dict:
    user = comment.user
    return {
        "id": comment.id,
        "ticket_id": comment.ticket_id,
        "content": comment.content,
        "created_at": comment.created_at,
        "user": {
            "id": user.id,
            "name": user.full_name or "Unknown User",
            "email": user.email,
            "role": user.role,
        },
    }
