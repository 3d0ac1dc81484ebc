# /app/db/base.py

# Central registry for all SQLAlchemy models. Importing them here ensures the
# Base class knows about every table before `create_all` runs.

from .database import Base

from .models.record_models import EntityRecord, EntitySequence
