# helpdesk/companies/services.py
from sqlalchemy.orm import Session
from helpdesk.companies.models import Company


def get_all_companies(db: Session) -> list[Company]:
    return db.query(Company).order_by(Company.name).all()


def get_company(db: Session, company_id: int) -> Company | None:
    return db.query(Company).filter(Company.id == company_id).first()
