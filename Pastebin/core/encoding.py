"""
Binary/text classification and the self-describing ``content`` column format.

The column holds exactly one of three forms:

* ``EXTERNAL`` - the literal ``EXTERNAL_SENTINEL``; bytes live in the object store.
* ``BINARY``   - ``BINARY_PREFIX`` followed by base64 of the raw bytes.
* ``TEXT``     - the raw bytes decoded as UTF-8, stored verbatim.

Both literals are reserved. Text that would be mistaken for either of them is
written in ``BINARY`` form, so decoding never has to guess.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Optional

EXTERNAL_SENTINEL = "$STORAGE_IN_R2"
BINARY_PREFIX = "$BASE64$"

SAMPLE_SIZE = 1024
NON_PRINTABLE_RATIO = 0.3


class ContentForm(str, Enum):
    EXTERNAL = "external"
    BINARY = "binary"
    TEXT = "text"


class CorruptContentError(ValueError):
    """Stored ``BINARY`` value whose base64 body does not decode."""


def is_binary(data: bytes) -> bool:
    """Heuristic check on at most the first ``SAMPLE_SIZE`` bytes."""
    sample = data[:SAMPLE_SIZE]
    if not sample:
        return False
    non_printable = 0
    for byte in sample:
        if byte == 0:
            return True
        if byte < 9 or 13 < byte < 32 or byte > 126:
            non_printable += 1
    return non_printable / len(sample) > NON_PRINTABLE_RATIO


@dataclass(frozen=True)
class StoredContent:
    form: ContentForm
    value: str

    @classmethod
    def external(cls) -> "StoredContent":
        return cls(ContentForm.EXTERNAL, EXTERNAL_SENTINEL)

    @classmethod
    def parse(cls, value: str) -> "StoredContent":
        """Recover the tag from a raw column value."""
        if value == EXTERNAL_SENTINEL:
            return cls(ContentForm.EXTERNAL, value)
        if value.startswith(BINARY_PREFIX):
            return cls(ContentForm.BINARY, value)
        return cls(ContentForm.TEXT, value)

    @property
    def is_external(self) -> bool:
        return self.form is ContentForm.EXTERNAL


def _as_text(data: bytes) -> Optional[str]:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if text == EXTERNAL_SENTINEL or text.startswith(BINARY_PREFIX):
        return None
    return text


def encode(data: bytes) -> StoredContent:
    """Inline-tier encoding; ``decode(encode(b)) == b`` for every ``b``.

    Empty input is tagged too: an empty column reads as a missing paste.
    """
    if data and not is_binary(data):
        text = _as_text(data)
        if text is not None:
            return StoredContent(ContentForm.TEXT, text)
    payload = base64.b64encode(data).decode("ascii")
    return StoredContent(ContentForm.BINARY, BINARY_PREFIX + payload)


def decode(stored: StoredContent) -> bytes:
    if stored.form is ContentForm.EXTERNAL:
        raise ValueError("external content has no inline bytes")
    if stored.form is ContentForm.BINARY:
        try:
            return base64.b64decode(stored.value[len(BINARY_PREFIX):], validate=True)
        except (binascii.Error, ValueError) as exc:
            raise CorruptContentError(str(exc)) from exc
    return stored.value.encode("utf-8")
