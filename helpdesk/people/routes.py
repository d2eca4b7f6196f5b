# helpdesk/people/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from helpdesk.auth.models import Profile
from helpdesk.core.database import get_db
from helpdesk.core.deps import require_company_admin
from helpdesk.people import services as people_service
from helpdesk.people.schemas import AgentOut, CustomerOut

router = APIRouter(prefix="/people", tags=["People"])


@router.get("/agents", response_model=list[AgentOut])
def agents(current_user: Profile = Depends(require_company_admin), db: Session = Depends(get_db)):
    return people_service.get_company_agents(db, current_user.company_id)


@router.get("/customers", response_model=list[CustomerOut])
def customers(current_user: Profile = Depends(require_company_admin), db: Session = Depends(get_db)):
    return people_service.get_company_customers(db, current_user.company_id)
