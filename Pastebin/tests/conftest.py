import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from Pastebin.core.config import Settings
from Pastebin.core.keys import KeyManager
from Pastebin.core.object_store import InMemoryObjectStore
from Pastebin.core.repositories import InMemoryPasteRepository
from Pastebin.core.tiering import TieringPolicy


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        SERVER="https://paste.example/",
        KEY_LENGTH=8,
        MAX_CONTENT_BYTES=4096,
        LARGE_OBJECT_THRESHOLD_BYTES=1024,
    )


@pytest.fixture()
def records() -> InMemoryPasteRepository:
    return InMemoryPasteRepository()


@pytest.fixture()
def objects() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture()
def tiering(records, objects, settings) -> TieringPolicy:
    return TieringPolicy(records=records, objects=objects, settings=settings)


@pytest.fixture()
def keys(settings) -> KeyManager:
    return KeyManager(settings)


@pytest.fixture()
def client(monkeypatch, records, objects, settings):
    from Pastebin.api import main
    from Pastebin.core.config import get_settings

    async def fake_init_db():
        return None

    monkeypatch.setattr("Pastebin.api.main.init_db", fake_init_db)
    main.app.dependency_overrides[main.get_paste_repository] = lambda: records
    main.app.dependency_overrides[main.get_object_store] = lambda: objects
    main.app.dependency_overrides[get_settings] = lambda: settings

    with TestClient(main.app) as test_client:
        yield test_client

    main.app.dependency_overrides.clear()
