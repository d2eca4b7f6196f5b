# helpdesk/notifications/services.py
"""Email admins when a customer files a ticket.

Runs as a FastAPI background task after the create response has been
sent, so it opens its own database session and never raises: delivery
failures are logged and the remaining recipients are still tried.
"""
import html
import logging

import requests
from requests.adapters import HTTPAdapter
from sqlalchemy.orm import Session
from urllib3.util.retry import Retry

from helpdesk.auth.models import Profile, UserRole
from helpdesk.core.config import Settings, get_settings
from helpdesk.core.database import SessionLocal
from helpdesk.tickets.models import Ticket

logger = logging.getLogger(__name__)


def build_session(settings: Settings) -> requests.Session:
    retry_strategy = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)

    session = requests.Session()
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({
        "Authorization": f"Bearer {settings.RESEND_API_KEY}",
        "Content-Type": "application/json",
    })
    return session


def admin_recipients(db: Session, ticket: Ticket) -> list[str]:
    query = db.query(Profile.email).filter(Profile.role == UserRole.ADMIN.value)
    if ticket.company_id is not None:
        query = query.filter(Profile.company_id == ticket.company_id)
    return [email for (email,) in query.order_by(Profile.email).all()]


def render_ticket_email(ticket: Ticket) -> tuple[str, str]:
    company_name = ticket.company.name if ticket.company else "N/A"
    subject = f"New Ticket Created: {ticket.title}"
    body = (
        "<h2>New Support Ticket Created</h2>"
        f"<p><strong>Title:</strong> {html.escape(ticket.title)}</p>"
        f"<p><strong>Description:</strong> {html.escape(ticket.description)}</p>"
        f"<p><strong>Company:</strong> {html.escape(company_name)}</p>"
        f"<p><strong>Priority:</strong> {html.escape(ticket.priority)}</p>"
        "<hr>"
        "<p>Please login to the support dashboard to assign this ticket to an agent.</p>"
    )
    return subject, body


def send_ticket_created_emails(
    db: Session,
    ticket: Ticket,
    settings: Settings,
    session: requests.Session | None = None,
) -> int:
    if not settings.RESEND_API_KEY:
        logger.info("RESEND_API_KEY not set; skipping notification for ticket %s", ticket.id)
        return 0

    recipients = admin_recipients(db, ticket)
    if not recipients:
        logger.info("No admins to notify for ticket %s", ticket.id)
        return 0

    subject, body = render_ticket_email(ticket)
    session = session or build_session(settings)
    sent = 0
    for email in recipients:
        payload = {"from": settings.NOTIFY_FROM, "to": email, "subject": subject, "html": body}
        try:
            resp = session.post(settings.RESEND_API_URL, json=payload, timeout=settings.NOTIFY_TIMEOUT)
        except requests.RequestException as exc:
            logger.error("Failed to send email to %s: %s", email, exc)
            continue
        if not resp.ok:
            logger.error("Failed to send email to %s: %s %s", email, resp.status_code, resp.text[:200])
            continue
        sent += 1
    logger.info("Ticket %s notification sent to %d/%d admin(s)", ticket.id, sent, len(recipients))
    return sent


def notify_ticket_created(ticket_id: int) -> int:
    """Background-task entry point; returns the number of emails delivered."""
    settings = get_settings()
    with SessionLocal() as db:
        ticket = db.query(Ticket).filter(Ticket.id == ticket_id).first()
        if ticket is None:
            logger.warning("Ticket %s vanished before notification", ticket_id)
            return 0
        return send_ticket_created_emails(db, ticket, settings)
