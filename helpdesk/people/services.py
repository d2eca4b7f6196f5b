# helpdesk/people/services.py
from sqlalchemy.orm import Session, joinedload

from helpdesk.auth.models import Profile, UserRole
from helpdesk.tickets.models import Ticket


def get_company_agents(db: Session, company_id: int) -> list[dict]:
    agents = (
        db.query(Profile)
        .options(joinedload(Profile.assigned_tickets))
        .filter(Profile.role == UserRole.AGENT.value, Profile.company_id == company_id)
        .order_by(Profile.full_name, Profile.id)
        .all()
    )
    return [
        {
            "id": agent.id,
            "email": agent.email,
            "full_name": agent.full_name,
            "tickets": sorted(agent.assigned_tickets, key=lambda t: t.id),
        }
        for agent in agents
    ]


def get_company_customers(db: Session, company_id: int) -> list[dict]:
    """Customers of the company plus customers who filed tickets against it."""
    members = (
        db.query(Profile)
        .options(joinedload(Profile.company))
        .filter(Profile.role == UserRole.CUSTOMER.value, Profile.company_id == company_id)
        .all()
    )
    filers = (
        db.query(Profile)
        .options(joinedload(Profile.company))
        .join(Ticket, Ticket.customer_id == Profile.id)
        .filter(Profile.role == UserRole.CUSTOMER.value, Ticket.company_id == company_id)
        .all()
    )

    unique: dict[int, Profile] = {}
    for customer in members + filers:
        unique.setdefault(customer.id, customer)

    return [
        {
            "id": customer.id,
            "email": customer.email,
            "full_name": customer.full_name,
            "company_id": customer.company_id,
            "company_name": customer.company.name if customer.company else None,
            "created_at": customer.created_at,
        }
        for customer in sorted(unique.values(), key=lambda c: c.id)
    ]
