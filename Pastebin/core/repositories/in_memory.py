from __future__ import annotations

from typing import Dict, Optional

from .base import PasteRepository
from ..models import PasteRecord


class InMemoryPasteRepository(PasteRepository):
    def __init__(self) -> None:
        self._rows: Dict[str, tuple[str, str]] = {}

    async def get(self, key: str) -> Optional[PasteRecord]:
        row = self._rows.get(key)
        if row is None:
            return None
        content, metadata_json = row
        return PasteRecord(key=key, content=content, metadata=PasteRecord.load_metadata(metadata_json))

    async def upsert(self, record: PasteRecord) -> None:
        self._rows[record.key] = (record.content, record.metadata_json())

    async def delete(self, key: str) -> bool:
        return self._rows.pop(key, None) is not None
