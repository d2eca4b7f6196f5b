# helpdesk/reports/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from helpdesk.auth.models import Profile, UserRole
from helpdesk.core.database import get_db
from helpdesk.core.deps import get_current_user, require_company_admin, require_roles
from helpdesk.reports import services as report_service
from helpdesk.reports.schemas import AgentPerformance, DashboardStats, ReportSummary

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(current_user: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    return report_service.dashboard_stats(db, current_user)


@router.get("/summary", response_model=ReportSummary)
def summary(current_user: Profile = Depends(require_company_admin), db: Session = Depends(get_db)):
    return report_service.report_summary(db, current_user)


@router.get("/agents", response_model=list[AgentPerformance])
def agents(current_user: Profile = Depends(require_company_admin), db: Session = Depends(get_db)):
    return report_service.company_agent_performance(db, current_user.company_id)


@router.get("/agents/me", response_model=AgentPerformance)
def my_performance(
    current_user: Profile = Depends(require_roles(UserRole.AGENT)),
    db: Session = Depends(get_db),
):
    return report_service.agent_performance(db, current_user)
