import asyncio

import pytest

from Pastebin.core.config import Settings
from Pastebin.core.encoding import EXTERNAL_SENTINEL, ContentForm
from Pastebin.core.errors import NotFoundError, ValidationError
from Pastebin.core.object_store import InMemoryObjectStore
from Pastebin.core.repositories import InMemoryPasteRepository
from Pastebin.core.tiering import TieringPolicy


def test_small_text_stays_inline(tiering, records, objects):
    form = asyncio.run(tiering.store("abc", b"print('hi')\n", {"ip": "1.2.3.4"}))
    assert form is ContentForm.TEXT

    record = asyncio.run(records.get("abc"))
    assert record.content == "print('hi')\n"
    assert record.creator_ip == "1.2.3.4"
    assert "abc" not in objects
    assert asyncio.run(tiering.load("abc")).data == b"print('hi')\n"


def test_empty_content_round_trip(tiering, records):
    asyncio.run(tiering.store("empty", b""))
    assert asyncio.run(records.get("empty")).content != ""
    loaded = asyncio.run(tiering.load("empty"))
    assert loaded.data == b""


def test_small_binary_is_tagged_inline(tiering, objects):
    data = b"\x00\x01\x02" * 10
    assert asyncio.run(tiering.store("bin", data)) is ContentForm.BINARY
    loaded = asyncio.run(tiering.load("bin"))
    assert loaded.data == data
    assert loaded.form is ContentForm.BINARY
    assert "bin" not in objects


def test_large_content_goes_to_object_store(tiering, records, objects):
    data = bytes(range(256)) * 5
    assert asyncio.run(tiering.store("big", data)) is ContentForm.EXTERNAL

    assert asyncio.run(records.get("big")).content == EXTERNAL_SENTINEL
    assert asyncio.run(objects.get("big")) == data
    assert asyncio.run(tiering.load("big")).data == data


def test_threshold_boundary_is_inline(tiering, objects):
    asyncio.run(tiering.store("edge", b"a" * 1024))
    assert "edge" not in objects
    asyncio.run(tiering.store("over", b"a" * 1025))
    assert "over" in objects


def test_oversized_content_is_rejected_without_writes(tiering, records, objects):
    asyncio.run(tiering.store("keep", b"original"))
    with pytest.raises(ValidationError):
        asyncio.run(tiering.store("keep", b"x" * 4097))
    assert asyncio.run(tiering.load("keep")).data == b"original"
    assert "keep" not in objects


def test_reupload_replaces_content(tiering):
    asyncio.run(tiering.store("k", b"A"))
    asyncio.run(tiering.store("k", b"B"))
    assert asyncio.run(tiering.load("k")).data == b"B"


def test_external_object_cleaned_when_key_moves_inline(tiering, objects):
    asyncio.run(tiering.store("k", b"z" * 2048))
    assert "k" in objects
    asyncio.run(tiering.store("k", b"small"))
    assert "k" not in objects
    assert asyncio.run(tiering.load("k")).data == b"small"


def test_missing_key_is_not_found(tiering):
    with pytest.raises(NotFoundError):
        asyncio.run(tiering.load("nope"))


def test_dangling_sentinel_is_not_found(tiering, objects):
    asyncio.run(tiering.store("big", b"y" * 2048))
    asyncio.run(objects.delete("big"))
    with pytest.raises(NotFoundError):
        asyncio.run(tiering.load("big"))


def test_corrupt_binary_record_is_not_found(tiering, records):
    from Pastebin.core.encoding import BINARY_PREFIX
    from Pastebin.core.models import PasteRecord

    asyncio.run(records.upsert(PasteRecord(key="bad", content=BINARY_PREFIX + "%%%")))
    with pytest.raises(NotFoundError):
        asyncio.run(tiering.load("bad"))


def test_remove_deletes_both_tiers(tiering, records, objects):
    asyncio.run(tiering.store("big", b"q" * 2048))
    record = asyncio.run(records.get("big"))
    asyncio.run(tiering.remove(record))
    assert asyncio.run(records.get("big")) is None
    assert "big" not in objects


def test_default_thresholds():
    tiering = TieringPolicy(InMemoryPasteRepository(), InMemoryObjectStore(), Settings())
    assert not tiering.is_large(int(1024 * 1024 * 0.99))
    assert tiering.is_large(1024 * 1024)
    with pytest.raises(ValidationError):
        asyncio.run(tiering.store("huge", b"\x00" * (15 * 1024 * 1024 + 1)))
    data = b"\x07" * (15 * 1024 * 1024)
    assert asyncio.run(tiering.store("max", data)) is ContentForm.EXTERNAL
    assert asyncio.run(tiering.load("max")).data == data
