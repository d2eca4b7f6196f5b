# helpdesk/tickets/models.py
import enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from helpdesk.core.database import Base, utcnow


class TicketStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class TicketPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), index=True, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), default=TicketStatus.OPEN.value, nullable=False, index=True)
    priority = Column(String(20), default=TicketPriority.MEDIUM.value, nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    assignee_id = Column(Integer, ForeignKey("profiles.id"), nullable=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    customer = relationship("Profile", foreign_keys=[customer_id], back_populates="filed_tickets")
    assignee = relationship("Profile", foreign_keys=[assignee_id], back_populates="assigned_tickets")
    company = relationship("Company", back_populates="tickets")
    assignment = relationship(
        "TicketAssignment", uselist=False, back_populates="ticket", cascade="all, delete-orphan"
    )
    comments = relationship("Comment", back_populates="ticket", cascade="all, delete-orphan")
    feedback = relationship("Feedback", back_populates="ticket", cascade="all, delete-orphan")


class TicketAssignment(Base):
    __tablename__ = "ticket_assignments"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), unique=True, nullable=False)
    agent_id = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    assigned_by = Column(Integer, ForeignKey("profiles.id"), nullable=False)
    assigned_at = Column(DateTime, default=utcnow)

    ticket = relationship("Ticket", back_populates="assignment")
