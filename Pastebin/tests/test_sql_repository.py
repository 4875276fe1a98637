import asyncio

from Pastebin.core.models import PasteRecord
from Pastebin.core.repositories import SqlPasteRepository
from Pastebin.core.storage import create_engine_for, init_db, make_session_factory


def _run_with_repository(tmp_path, scenario):
    async def runner():
        engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'pastes.db'}")
        try:
            await init_db(engine)
            return await scenario(SqlPasteRepository(make_session_factory(engine)))
        finally:
            await engine.dispose()

    return asyncio.run(runner())


def test_insert_or_replace(tmp_path):
    async def scenario(repo):
        await repo.upsert(PasteRecord(key="k1", content="first", metadata={"ip": "1.2.3.4"}))
        await repo.upsert(PasteRecord(key="k1", content="second", metadata={"ip": "5.6.7.8"}))
        return await repo.get("k1")

    record = _run_with_repository(tmp_path, scenario)
    assert record.content == "second"
    assert record.creator_ip == "5.6.7.8"


def test_get_missing_returns_none(tmp_path):
    async def scenario(repo):
        return await repo.get("missing")

    assert _run_with_repository(tmp_path, scenario) is None


def test_delete(tmp_path):
    async def scenario(repo):
        await repo.upsert(PasteRecord(key="gone", content="bye"))
        removed = await repo.delete("gone")
        removed_again = await repo.delete("gone")
        return removed, removed_again, await repo.get("gone")

    assert _run_with_repository(tmp_path, scenario) == (True, False, None)
