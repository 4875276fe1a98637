from __future__ import annotations

from typing import Optional

from . import multipart
from .config import Settings
from .errors import NotFoundError, ValidationError
from .keys import KeyManager
from .render import RenderedPaste, render
from .tiering import TieringPolicy

CONTENT_FIELD = "c"


class PasteService:
    """
    Coordinates parsing, key assignment, tiered storage and rendering.
    """

    def __init__(self, tiering: TieringPolicy, keys: KeyManager, settings: Settings) -> None:
        self.tiering = tiering
        self.keys = keys
        self.server = settings.SERVER

    async def upload(
        self,
        *,
        body: bytes,
        content_type: str,
        client_ip: Optional[str],
        key: Optional[str] = None,
    ) -> str:
        if not multipart.is_form_data(content_type):
            raise ValidationError("Content-Type must be multipart/form-data")

        form = multipart.parse(body, multipart.extract_boundary(content_type))
        part = form.get(CONTENT_FIELD)
        if part is None or not part.content:
            raise ValidationError("Content not found")

        paste_key = self.keys.resolve_key(key)
        await self.tiering.store(paste_key, part.content, {"ip": client_ip})
        return f"{self.server}{paste_key}\n"

    async def retrieve(self, raw_key: str) -> RenderedPaste:
        key, extension = self.keys.split_key(raw_key)
        paste = await self.tiering.load(key)
        return await render(paste, extension)

    async def delete(self, key: str, client_ip: Optional[str]) -> str:
        record = await self.tiering.records.get(key)
        if record is None:
            raise NotFoundError()
        self.keys.authorize_delete(record, client_ip)
        await self.tiering.remove(record)
        return "Deleted"
