# /app/db/database.py

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Only consulted when the SQL store is enabled (see database_service.USE_SQL_STORE).
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./classtrack.db")

# The 'check_same_thread' argument is only needed for SQLite.
engine_args = {"connect_args": {"check_same_thread": False}} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, **engine_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Our database model classes inherit from this.
Base = declarative_base()


def init_db(bind=None):
    """Creates any missing tables. Safe to call on every startup."""
    # Importing the registry ensures every model is attached to Base.metadata.
    from . import base  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)


# Dependency to get a DB session. This will be used in our API routers.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
