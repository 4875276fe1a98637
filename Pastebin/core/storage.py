from typing import Optional

from sqlalchemy import Column, String, Text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import get_settings

Base = declarative_base()
_engine: Optional[AsyncEngine] = None
AsyncSessionLocal = None


class PasteModel(Base):
    __tablename__ = "pastebin"

    key = Column(String, primary_key=True)
    content = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    metadata_json = Column("metadata", Text, nullable=False, default="{}")


def create_engine_for(db_url: str) -> AsyncEngine:
    return create_async_engine(db_url, echo=False)


def make_session_factory(engine: AsyncEngine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def _create_engine() -> AsyncEngine:
    global _engine, AsyncSessionLocal
    if _engine is not None:
        return _engine
    _engine = create_engine_for(get_settings().DB_URL)
    AsyncSessionLocal = make_session_factory(_engine)
    return _engine


def get_session_factory():
    if AsyncSessionLocal is None:
        _create_engine()
    return AsyncSessionLocal


async def init_db(engine: Optional[AsyncEngine] = None) -> None:
    engine = engine or _create_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
