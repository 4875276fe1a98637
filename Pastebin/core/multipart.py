"""
Byte-level multipart/form-data parser.

Works on the raw request body without ever decoding the payload, so binary
uploads come back bit-identical. Only the part headers are decoded (latin-1,
which maps every byte and cannot fail).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

CRLF = b"\r\n"
HEADER_END = b"\r\n\r\n"

_PARAM_RE = re.compile(r';\s*([A-Za-z0-9_*-]+)\s*=\s*("(?:[^"\\]|\\.)*"|[^;]*)')


@dataclass
class Part:
    name: str
    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None


def is_form_data(content_type: str) -> bool:
    return "multipart/form-data" in content_type.lower()


def extract_boundary(content_type: str) -> str:
    """Return the boundary parameter of a Content-Type header, or "" when absent."""
    marker = content_type.find("boundary=")
    if marker < 0:
        return ""
    value = content_type[marker + len("boundary="):].split(";", 1)[0].strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1]
    return value


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return re.sub(r"\\(.)", r"\1", value[1:-1])
    return value


def _parse_disposition(value: str) -> Tuple[str, Dict[str, str]]:
    disposition, _, _ = value.partition(";")
    params = {
        match.group(1).lower(): _unquote(match.group(2))
        for match in _PARAM_RE.finditer(value)
    }
    return disposition.strip().lower(), params


def _parse_headers(block: bytes) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for line in block.decode("latin-1").split("\r\n"):
        name, sep, value = line.partition(":")
        if sep:
            headers[name.strip().lower()] = value.strip()
    return headers


def _is_delimiter_end(body: bytes, pos: int) -> bool:
    # A real delimiter is followed by "--" (close) or optional padding and CRLF.
    tail = body[pos:pos + 2]
    if tail == b"--" or tail == CRLF or pos >= len(body):
        return True
    line_end = body.find(CRLF, pos)
    if line_end < 0:
        return False
    return body[pos:line_end].strip(b" \t") == b""


def _find_delimiter(body: bytes, delimiter: bytes, start: int) -> int:
    """Offset of the next CRLF--boundary sequence at or after ``start``, or -1."""
    needle = CRLF + delimiter
    pos = body.find(needle, start)
    while pos >= 0:
        if _is_delimiter_end(body, pos + len(needle)):
            return pos
        pos = body.find(needle, pos + 1)
    return -1


def parse(body: bytes, boundary: str) -> Dict[str, Part]:
    """Split ``body`` into named parts using ``boundary``.

    A missing boundary, or a body that never contains it, yields an empty map.
    When a field name repeats, the last occurrence wins.
    """
    parts: Dict[str, Part] = {}
    if not boundary:
        return parts

    delimiter = b"--" + boundary.encode("latin-1")

    # The first delimiter may sit at offset 0 with no leading CRLF.
    if body.startswith(delimiter) and _is_delimiter_end(body, len(delimiter)):
        cursor = len(delimiter)
    else:
        found = _find_delimiter(body, delimiter, 0)
        if found < 0:
            return parts
        cursor = found + len(CRLF) + len(delimiter)

    while True:
        if body[cursor:cursor + 2] == b"--":
            break
        line_end = body.find(CRLF, cursor)
        if line_end < 0:
            break
        header_end = body.find(HEADER_END, line_end)
        if header_end < 0:
            break
        headers = _parse_headers(body[line_end + len(CRLF):header_end])
        content_start = header_end + len(HEADER_END)

        next_delimiter = _find_delimiter(body, delimiter, content_start)
        if next_delimiter < 0:
            break
        content = body[content_start:next_delimiter]

        disposition, params = _parse_disposition(headers.get("content-disposition", ""))
        name = params.get("name")
        if disposition == "form-data" and name is not None:
            parts[name] = Part(
                name=name,
                content=content,
                filename=params.get("filename"),
                content_type=headers.get("content-type"),
            )

        cursor = next_delimiter + len(CRLF) + len(delimiter)

    return parts
