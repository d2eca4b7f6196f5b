# helpdesk/companies/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from helpdesk.companies import services as company_service
from helpdesk.companies.schemas import CompanyOut
from helpdesk.core.database import get_db
from helpdesk.core.deps import get_current_user

router = APIRouter(prefix="/companies", tags=["Companies"], dependencies=[Depends(get_current_user)])


@router.get("/", response_model=list[CompanyOut])
def list_all(db: Session = Depends(get_db)):
    return company_service.get_all_companies(db)


@router.get("/{company_id}", response_model=CompanyOut)
def get(company_id: int, db: Session = Depends(get_db)):
    company = company_service.get_company(db, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company
