from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..models import PasteRecord


class PasteRepository(ABC):
    """
    Relational side of paste storage; can be backed by SQL or in-memory.

    ``upsert`` is an atomic insert-or-replace for a single key.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[PasteRecord]:
        raise NotImplementedError

    @abstractmethod
    async def upsert(self, record: PasteRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> bool:
        raise NotImplementedError
