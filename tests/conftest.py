# /tests/conftest.py

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.database import init_db
from app.services.database_service import DatabaseService, build_memory_repositories, build_sql_repositories


@pytest.fixture
def db():
    """A DatabaseService over fresh, empty, zero-latency in-memory repositories."""
    return DatabaseService(repositories=build_memory_repositories(seed=False))


@pytest.fixture
def seeded_db():
    """A DatabaseService over in-memory repositories loaded from app/data fixtures."""
    return DatabaseService(repositories=build_memory_repositories(seed=True))


@pytest.fixture
def sql_session():
    """A session on a private in-memory SQLite database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def sql_db(sql_session):
    return DatabaseService(repositories=build_sql_repositories(sql_session))
