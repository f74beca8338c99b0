# =============================================================
# filename_decoder.py
# =============================================================
"""Filename resolution for attachment parts.

Candidates are tried in order, first non-empty wins:

1. ``filename*=charset''value`` (RFC 2231 extended value)
2. ``filename="value"``
3. ``filename=value``

against Content-Disposition, then the same three forms of the ``name``
parameter against Content-Type. Every captured value is percent-decoded and
then run through RFC 2047 ``Q`` encoded-word decoding. ``B`` encoded-words are
left as they are.
"""
from __future__ import annotations

import re
import urllib.parse
from typing import Optional, Tuple

import chardet

ENCODED_WORD = re.compile(r"=\?([^?\s]+)\?([QqBb])\?([^?]*)\?=")
HEX_ESCAPE = re.compile(rb"=([0-9A-Fa-f]{2})")

CHARDET_MIN_CONFIDENCE = 0.7


def _parameter_patterns(param: str) -> Tuple[re.Pattern, re.Pattern, re.Pattern]:
    prefix = rf"(?<![\w-]){param}"
    return (
        re.compile(prefix + r"\*=([\w!#$%&+^`{}~.-]+)'[^']*'([^;\s]+)", re.IGNORECASE),
        re.compile(prefix + r'="([^"]+)"', re.IGNORECASE),
        re.compile(prefix + r'=(?!")([^;\s]+)', re.IGNORECASE),
    )


FILENAME_PATTERNS = _parameter_patterns("filename")
NAME_PATTERNS = _parameter_patterns("name")


def decode_header_bytes(raw: bytes, charset: Optional[str]) -> str:
    """Transcode header bytes from ``charset``.

    Unknown or wrong charsets fall back to chardet detection, then Latin-1.
    """
    if charset:
        try:
            return raw.decode(charset.split("*", 1)[0])
        except (LookupError, UnicodeDecodeError):
            pass

    detected = chardet.detect(raw)
    if detected and detected["encoding"] and detected["confidence"] > CHARDET_MIN_CONFIDENCE:
        try:
            return raw.decode(detected["encoding"])
        except (LookupError, UnicodeDecodeError):
            pass

    return raw.decode("latin-1")


def _decode_q_word(charset: str, text: str) -> str:
    raw = text.replace("_", " ").encode("utf-8")
    raw = HEX_ESCAPE.sub(lambda m: bytes([int(m.group(1), 16)]), raw)
    return decode_header_bytes(raw, charset)


def decode_encoded_words(value: str) -> str:
    """Decode ``=?charset?Q?...?=`` words, keeping ``B`` words verbatim.

    Whitespace between two adjacent decoded words is dropped.
    """
    if "=?" not in value:
        return value

    out = []
    last = 0
    prev_decoded = False
    for match in ENCODED_WORD.finditer(value):
        between = value[last:match.start()]
        is_q = match.group(2) in "Qq"
        if not (prev_decoded and is_q and not between.strip()):
            out.append(between)
        if is_q:
            out.append(_decode_q_word(match.group(1), match.group(3)))
        else:
            out.append(match.group(0))
        prev_decoded = is_q
        last = match.end()
    out.append(value[last:])
    return "".join(out)


def percent_decode(value: str, charset: str = "utf-8") -> str:
    """Undo %XX escapes; values that do not decode cleanly are returned unchanged."""
    if "%" not in value:
        return value
    try:
        return urllib.parse.unquote(value, encoding=charset, errors="strict")
    except LookupError:
        return percent_decode(value)
    except UnicodeDecodeError:
        return value


def _clean(value: str) -> str:
    return value.rstrip("\x00").strip()


def _from_header(header: str, patterns) -> Optional[str]:
    extended, quoted, bare = patterns

    match = extended.search(header)
    if match:
        name = _clean(decode_encoded_words(percent_decode(match.group(2), match.group(1))))
        if name:
            return name

    for pattern in (quoted, bare):
        match = pattern.search(header)
        if match:
            name = _clean(decode_encoded_words(percent_decode(match.group(1))))
            if name:
                return name
    return None


def resolve_filename(disposition: str, content_type: str) -> Optional[str]:
    """Return the decoded attachment filename, or ``None`` if neither header names one."""
    return _from_header(disposition, FILENAME_PATTERNS) or _from_header(content_type, NAME_PATTERNS)
