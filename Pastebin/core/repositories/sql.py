from __future__ import annotations

from typing import Optional

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from .base import PasteRepository
from ..errors import BackendError
from ..models import PasteRecord
from ..storage import PasteModel

_INSERTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


class SqlPasteRepository(PasteRepository):
    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> Optional[PasteRecord]:
        try:
            async with self._session_factory() as session:
                row = await session.get(PasteModel, key)
        except SQLAlchemyError as exc:
            raise BackendError(f"Failed to read paste {key}") from exc
        if row is None:
            return None
        return PasteRecord(
            key=row.key,
            content=row.content,
            metadata=PasteRecord.load_metadata(row.metadata_json),
        )

    async def upsert(self, record: PasteRecord) -> None:
        table = PasteModel.__table__
        try:
            async with self._session_factory() as session:
                dialect = session.get_bind().dialect.name
                insert = _INSERTS.get(dialect)
                if insert is None:
                    raise BackendError(f"Unsupported database dialect: {dialect}")
                stmt = insert(table).values(
                    {"key": record.key, "content": record.content, "metadata": record.metadata_json()}
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[table.c.key],
                    set_={
                        "content": stmt.excluded.content,
                        "metadata": stmt.excluded["metadata"],
                    },
                )
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            raise BackendError(f"Failed to write paste {record.key}") from exc

    async def delete(self, key: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(delete(PasteModel).where(PasteModel.key == key))
                await session.commit()
        except SQLAlchemyError as exc:
            raise BackendError(f"Failed to delete paste {key}") from exc
        return result.rowcount > 0
