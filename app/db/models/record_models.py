# /app/db/models/record_models.py

"""
SQLAlchemy models backing the SQL record store.

Every entity type shares one table: a record is stored as its JSON payload,
keyed by (entity_type, record_id). Records keep their loose, camelCase shape
this way, including foreign keys held as embedded objects or id lists.
"""

from sqlalchemy import Column, Integer, String, JSON, UniqueConstraint

from ..database import Base


class EntityRecord(Base):
    """One stored record of any entity type."""
    __tablename__ = "entity_records"
    __table_args__ = (UniqueConstraint("entity_type", "record_id", name="uq_entity_record"),)

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    entity_type = Column(String, index=True, nullable=False)
    # The public `Id` of the record, issued from EntitySequence.
    record_id = Column(Integer, nullable=False)
    payload = Column(JSON, nullable=False)


class EntitySequence(Base):
    """
    Last id issued per entity type. Ids come from here rather than from the
    current maximum so that deleted ids are never handed out again.
    """
    __tablename__ = "entity_sequences"

    entity_type = Column(String, primary_key=True)
    last_id = Column(Integer, nullable=False, default=0)
