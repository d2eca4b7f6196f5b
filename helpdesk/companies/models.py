# helpdesk/companies/models.py
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from helpdesk.core.database import Base, utcnow


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, index=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    profiles = relationship("Profile", back_populates="company")
    tickets = relationship("Ticket", back_populates="company")
