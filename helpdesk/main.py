# helpdesk/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helpdesk.core.config import get_settings
from helpdesk.core.database import init_db
from helpdesk.auth.routes import router as auth_router
from helpdesk.comments.routes import router as comment_router
from helpdesk.companies.routes import router as company_router
from helpdesk.feedback.routes import router as feedback_router
from helpdesk.people.routes import router as people_router
from helpdesk.realtime.routes import router as realtime_router
from helpdesk.reports.routes import router as report_router
from helpdesk.tickets.routes import router as ticket_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

init_db()

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESC,
    version=settings.APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router)
app.include_router(company_router)
app.include_router(ticket_router)
app.include_router(comment_router)
app.include_router(feedback_router)
app.include_router(people_router)
app.include_router(report_router)
app.include_router(realtime_router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
