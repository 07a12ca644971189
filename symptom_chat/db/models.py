# symptom_chat/db/models.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Text
from sqlmodel import Field, SQLModel


# -------------------------
# Helpers
# -------------------------

def utcnow() -> datetime:
    """Timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


# -------------------------
# Session persistence
# -------------------------

class SessionBlob(SQLModel, table=True):
    """Whole-value persisted mirror of one chat session.

    `value` holds the JSON array of compact message records; it is always
    overwritten as a unit.
    """
    __tablename__ = "session_blob"

    key: str = Field(primary_key=True, description="Persistence key, one active session each")
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)
