from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from anyio import to_thread
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from .encoding import ContentForm
from .tiering import LoadedPaste

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "webp", "bmp", "ico"})

HTML_MEDIA_TYPE = "text/html; charset=utf-8"
TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"
BINARY_MEDIA_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class RenderedPaste:
    body: Union[bytes, str]
    media_type: str


def _lexer_for(extension: str):
    try:
        return get_lexer_by_name(extension)
    except ClassNotFound:
        pass
    try:
        return get_lexer_for_filename(f"paste.{extension}")
    except ClassNotFound:
        return TextLexer()


def highlight(text: str, extension: str, title: str = "") -> str:
    """Render ``text`` as a standalone HTML page highlighted for ``extension``."""
    formatter = HtmlFormatter(full=True, linenos="table", title=title or extension)
    return pygments_highlight(text, _lexer_for(extension), formatter)


async def render(paste: LoadedPaste, extension: Optional[str] = None) -> RenderedPaste:
    """
    Pick the response shape for a loaded paste.

    The extension is trusted over the bytes: ``key.png`` is served as
    ``image/png`` whatever was uploaded. Highlighting runs in a worker
    thread since pastes reach several megabytes.
    """
    if extension and extension.lower() in IMAGE_EXTENSIONS:
        return RenderedPaste(body=paste.data, media_type=f"image/{extension.lower()}")

    if extension:
        text = paste.data.decode("utf-8", errors="replace")
        page = await to_thread.run_sync(highlight, text, extension, paste.key)
        return RenderedPaste(body=page, media_type=HTML_MEDIA_TYPE)

    if paste.form is ContentForm.BINARY:
        return RenderedPaste(body=paste.data, media_type=BINARY_MEDIA_TYPE)

    try:
        text = paste.data.decode("utf-8")
    except UnicodeDecodeError:
        return RenderedPaste(body=paste.data, media_type=BINARY_MEDIA_TYPE)
    return RenderedPaste(body=text, media_type=TEXT_MEDIA_TYPE)
