# symptom_chat/services/repo.py
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from symptom_chat.db.models import SessionBlob, utcnow
from symptom_chat.errors import PersistenceError


class Repo:
    """
    Data Access Layer for persisted chat sessions.

    Each key holds one JSON document that is replaced as a whole. Every call
    opens its own session and commits before returning. Database failures
    are re-raised as PersistenceError so callers can handle the medium being
    unavailable without knowing about SQLAlchemy.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory

    async def get_session_blob(self, key: str) -> Optional[str]:
        async with self._session_factory() as session:
            try:
                row = await session.get(SessionBlob, key)
            except SQLAlchemyError as e:
                raise PersistenceError(f"read failed for {key!r}: {e}") from e
            return None if row is None else row.value

    async def put_session_blob(self, key: str, value: str) -> None:
        """Insert or overwrite the blob at `key`."""
        async with self._session_factory() as session:
            try:
                row = await session.get(SessionBlob, key)
                if row is None:
                    session.add(SessionBlob(key=key, value=value))
                else:
                    row.value = value
                    row.updated_at = utcnow()
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise PersistenceError(f"write failed for {key!r}: {e}") from e

    async def delete_session_blob(self, key: str) -> None:
        """Remove the blob at `key`; a missing key is not an error."""
        async with self._session_factory() as session:
            try:
                await session.execute(delete(SessionBlob).where(SessionBlob.key == key))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise PersistenceError(f"delete failed for {key!r}: {e}") from e
