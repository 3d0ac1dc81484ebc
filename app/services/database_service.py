# /app/services/database_service.py

"""
Facade over the per-entity record stores.

One repository per entity type (student, class, assignment, grade,
attendance), all exposing the same async CRUD contract. The backend is chosen
by environment variable: the in-memory store (optionally seeded from the JSON
fixtures in `app/data/`) or the SQLAlchemy store.
"""

import os
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Generator, Optional

from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db

# --- Repository Imports ---
from .database_helpers.entity_repository import EntityRepository, load_fixture
from .database_helpers.entity_repository_sql import EntityRepositorySQL

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.getenv("MOCK_DATA_DIR", Path(__file__).resolve().parent.parent / "data"))

USE_SQL_STORE = os.getenv("USE_SQL_STORE", "false").lower() == "true"
SEED_MOCK_DATA = os.getenv("SEED_MOCK_DATA", "true").lower() == "true"
SIMULATED_LATENCY_SCALE = float(os.getenv("SIMULATED_LATENCY_SCALE", "0"))

# Per-entity store settings: defaults merged under every created record,
# whether create/update stamp timestamps, and the seed fixture file.
ENTITY_SETTINGS = {
    "student": {"defaults": {"classIds": []}, "stamp_timestamps": True, "fixture": "students.json"},
    "class": {"defaults": {"studentIds": []}, "stamp_timestamps": False, "fixture": "classes.json"},
    "assignment": {"defaults": {}, "stamp_timestamps": False, "fixture": "assignments.json"},
    "grade": {"defaults": {}, "stamp_timestamps": False, "fixture": "grades.json"},
    "attendance": {"defaults": {"notes": ""}, "stamp_timestamps": False, "fixture": "attendance.json"},
}


def build_memory_repositories(
    seed: bool = False,
    data_dir: Path = DATA_DIR,
    latency_scale: float = 0.0,
) -> Dict[str, EntityRepository]:
    """Creates a fresh set of in-memory repositories, optionally seeded from fixtures."""
    repositories = {}
    for entity, settings in ENTITY_SETTINGS.items():
        initial_records = []
        if seed:
            fixture_path = Path(data_dir) / settings["fixture"]
            if fixture_path.exists():
                initial_records = load_fixture(fixture_path)
            else:
                logger.warning("No fixture for %s at %s; starting empty.", entity, fixture_path)
        repositories[entity] = EntityRepository(
            entity,
            defaults=settings["defaults"],
            initial_records=initial_records,
            stamp_timestamps=settings["stamp_timestamps"],
            latency_scale=latency_scale,
        )
    return repositories


def build_sql_repositories(db_session: Session, latency_scale: float = 0.0) -> Dict[str, EntityRepositorySQL]:
    return {
        entity: EntityRepositorySQL(
            db_session,
            entity,
            defaults=settings["defaults"],
            stamp_timestamps=settings["stamp_timestamps"],
            latency_scale=latency_scale,
        )
        for entity, settings in ENTITY_SETTINGS.items()
    }


@lru_cache(maxsize=1)
def get_memory_repositories() -> Dict[str, EntityRepository]:
    """The process-wide in-memory store. Built once, on first use."""
    return build_memory_repositories(
        seed=SEED_MOCK_DATA,
        latency_scale=SIMULATED_LATENCY_SCALE,
    )


class DatabaseService:
    def __init__(self, db_session: Optional[Session] = None, repositories: Optional[Dict] = None):
        """
        Initializes the DatabaseService.

        Explicit `repositories` win. Otherwise, if USE_SQL_STORE is true a
        db_session is required; if not, the shared in-memory store is used.
        """
        if repositories is None:
            if USE_SQL_STORE:
                if not db_session:
                    raise ValueError("A database session is required when USE_SQL_STORE is true.")
                repositories = build_sql_repositories(db_session, latency_scale=SIMULATED_LATENCY_SCALE)
            else:
                repositories = get_memory_repositories()

        self.student_repo = repositories["student"]
        self.class_repo = repositories["class"]
        self.assignment_repo = repositories["assignment"]
        self.grade_repo = repositories["grade"]
        self.attendance_repo = repositories["attendance"]


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService instance."""
    yield DatabaseService(db_session=db if USE_SQL_STORE else None)
