from .base import PasteRepository
from .in_memory import InMemoryPasteRepository
from .sql import SqlPasteRepository

__all__ = ["PasteRepository", "InMemoryPasteRepository", "SqlPasteRepository"]
