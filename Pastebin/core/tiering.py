"""
Size-based placement of paste bytes.

Small pastes are encoded into the relational ``content`` column. Pastes
above ``LARGE_OBJECT_THRESHOLD_BYTES`` leave the sentinel there and keep the
raw bytes in the object store under the same key.

The two writes of the large path are not transactional. The row is written
first, so a failed object write leaves a sentinel without backing bytes; that
paste then reads as not found until it is uploaded again or deleted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from . import encoding
from .config import Settings
from .encoding import CorruptContentError, StoredContent
from .errors import NotFoundError, ValidationError
from .models import PasteRecord
from .object_store import ObjectStore
from .repositories import PasteRepository

log = logging.getLogger("pastebin.tiering")


@dataclass(frozen=True)
class LoadedPaste:
    key: str
    data: bytes
    # Tag of the form the bytes were recovered from
    form: encoding.ContentForm


class TieringPolicy:
    def __init__(self, records: PasteRepository, objects: ObjectStore, settings: Settings) -> None:
        self.records = records
        self.objects = objects
        self.max_bytes = settings.MAX_CONTENT_BYTES
        self.large_object_threshold = settings.LARGE_OBJECT_THRESHOLD_BYTES

    def is_large(self, size: int) -> bool:
        return size > self.large_object_threshold

    async def store(self, key: str, data: bytes, metadata: Optional[Dict[str, Any]] = None) -> encoding.ContentForm:
        size = len(data)
        if size > self.max_bytes:
            raise ValidationError("Content is too large")

        previous = await self.records.get(key)

        if self.is_large(size):
            stored = StoredContent.external()
            await self.records.upsert(PasteRecord(key=key, content=stored.value, metadata=metadata or {}))
            await self.objects.put(key, data)
        else:
            stored = encoding.encode(data)
            await self.records.upsert(PasteRecord(key=key, content=stored.value, metadata=metadata or {}))
            if previous is not None and previous.stored.is_external:
                # The key moved back inline; drop the bytes it no longer points at.
                await self.objects.delete(key)

        log.info("Stored paste %s (%s, %d bytes)", key, stored.form.value, size)
        return stored.form

    async def load(self, key: str) -> LoadedPaste:
        record = await self.records.get(key)
        if record is None or not record.content:
            raise NotFoundError()

        stored = record.stored
        if stored.is_external:
            data = await self.objects.get(key)
            if data is None:
                log.warning("Paste %s points at a missing external object", key)
                raise NotFoundError()
            return LoadedPaste(key=key, data=data, form=stored.form)

        try:
            data = encoding.decode(stored)
        except CorruptContentError:
            log.warning("Paste %s holds undecodable binary content", key)
            raise NotFoundError()
        return LoadedPaste(key=key, data=data, form=stored.form)

    async def remove(self, record: PasteRecord) -> None:
        if record.stored.is_external:
            await self.objects.delete(record.key)
        await self.records.delete(record.key)
        log.info("Deleted paste %s", record.key)
