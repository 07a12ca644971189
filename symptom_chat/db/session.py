# symptom_chat/db/session.py
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from symptom_chat.settings import load_settings

from .models import SessionBlob  # noqa: F401  ensure models are imported for metadata


# -------------------------
# Database URL & engine
# -------------------------

_settings = load_settings()

engine: AsyncEngine = create_async_engine(
    _settings.database_url,
    echo=_settings.sql_echo,
    pool_pre_ping=True,
)


# -------------------------
# Session factory (async)
# -------------------------

SessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    autoflush=False,
)


# -------------------------
# Schema management
# -------------------------

async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create all tables if they do not exist (dev/local usage)."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
