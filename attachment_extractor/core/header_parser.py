# =============================================================
# header_parser.py
# =============================================================
"""RFC 5322 header block parsing over a byte range.

:func:`parse_headers` reads ``key: value`` lines from ``data[start:end]``
until the first blank line and returns the lower-cased header map together
with the absolute offset where the body begins. Only header lines are decoded
to text; the body is left untouched so binary payloads survive.
"""
from __future__ import annotations

from typing import List, Optional

from ..data_models import HeaderBlock, HeaderMap

_BLANK = b"\r\t "


def decode_text(raw: bytes) -> str:
    """Decode header bytes as UTF-8, falling back to Latin-1."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def _finish(first: str, continuations: List[str]) -> str:
    value = first
    for piece in continuations:
        value += " " + piece
    return value.strip()


def parse_headers(data: bytes, start: int = 0, end: Optional[int] = None) -> HeaderBlock:
    """Parse the header block at ``data[start:end]``.

    Folded lines (leading space or tab) are joined to the previous value with
    a single space. A repeated header replaces the earlier value. When no
    blank line terminates the block, ``body_start`` is ``None``.
    """
    if end is None:
        end = len(data)

    headers: HeaderMap = {}
    key: Optional[str] = None
    first = ""
    continuations: List[str] = []

    pos = start
    while pos < end:
        newline = data.find(b"\n", pos, end)
        line_end = end if newline == -1 else newline
        next_pos = end if newline == -1 else newline + 1
        raw_line = data[pos:line_end]
        pos = next_pos

        if not raw_line.strip(_BLANK):
            if key is not None:
                headers[key] = _finish(first, continuations)
            return HeaderBlock(headers, next_pos)

        line = decode_text(raw_line).rstrip("\r")

        if line[0] in " \t":
            if key is not None:
                continuations.append(line.strip())
            continue

        name, colon, value = line.partition(":")
        if not (colon and name.strip()):
            # stray line, later continuations still belong to the open header
            continue

        if key is not None:
            headers[key] = _finish(first, continuations)
        key = name.strip().lower()
        first = value
        continuations = []

    if key is not None:
        headers[key] = _finish(first, continuations)
    return HeaderBlock(headers, None)
