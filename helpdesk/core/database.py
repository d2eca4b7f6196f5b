# helpdesk/core/database.py
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from helpdesk.core.config import get_settings

settings = get_settings()

is_sqlite = settings.DATABASE_URL.startswith("sqlite")
connect_args = {"check_same_thread": False} if is_sqlite else {}
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

if is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def utcnow() -> datetime:
    # stored naive, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_db():
    # register every table on Base.metadata before creating
    from helpdesk.auth import models as _auth  # noqa: F401
    from helpdesk.companies import models as _companies  # noqa: F401
    from helpdesk.tickets import models as _tickets  # noqa: F401
    from helpdesk.comments import models as _comments  # noqa: F401
    from helpdesk.feedback import models as _feedback  # noqa: F401

    Base.metadata.create_all(bind=engine)


# Common DB dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
