# =============================================================
# mime_walker.py
# =============================================================
"""Depth-first traversal of nested ``multipart/*`` bodies.

:func:`walk_multipart` splits a span of the message on ``--<boundary>`` and
hands each segment to :func:`~.part_decoder.classify_part`. Nested multiparts
come back as ``NESTED`` outcomes and are walked with ``depth + 1`` until
``max_nested_depth`` is reached; deeper branches are dropped, not expanded.
"""
from __future__ import annotations

import logging
from typing import Iterator, Tuple

from ..data_models import OutcomeKind, SkipReason
from ..diagnostics import DiagnosticKind
from .context import ExtractionContext
from .part_decoder import classify_part, inspect_attachment


def split_segments(data: bytes, start: int, end: int, delimiter: bytes) -> Iterator[Tuple[int, int]]:
    """Yield the ``(start, end)`` span following each delimiter occurrence.

    The preamble before the first delimiter is never yielded.
    """
    pos = data.find(delimiter, start, end)
    while pos != -1:
        seg_start = pos + len(delimiter)
        nxt = data.find(delimiter, seg_start, end)
        yield seg_start, (end if nxt == -1 else nxt)
        pos = nxt


def boundary_delimiter(data: bytes, start: int, end: int, boundary: str) -> bytes:
    """Encode ``--<boundary>`` the way the body spells it.

    Header lines that are not UTF-8 were decoded as Latin-1, so a boundary
    missing from the span in UTF-8 form is retried in Latin-1.
    """
    delimiter = b"--" + boundary.encode("utf-8")
    if data.find(delimiter, start, end) == -1:
        try:
            return b"--" + boundary.encode("latin-1")
        except UnicodeEncodeError:
            pass
    return delimiter


def walk_multipart(ctx: ExtractionContext, start: int, end: int, boundary: str, depth: int) -> None:
    """Collect attachments from the multipart body at ``ctx.data[start:end]``."""
    data = ctx.data
    report = ctx.report
    report.max_depth_seen = max(report.max_depth_seen, depth)

    delimiter = boundary_delimiter(data, start, end, boundary)
    count = 0

    for seg_start, seg_end in split_segments(data, start, end, delimiter):
        if data.startswith(b"--", seg_start, seg_end):
            # closing delimiter, the rest is epilogue
            break
        if not data[seg_start:seg_end].strip():
            continue

        count += 1
        report.parts_seen += 1
        outcome = classify_part(ctx, seg_start, seg_end, depth)

        if outcome.kind is OutcomeKind.NESTED:
            part = outcome.part
            if depth + 1 > ctx.max_depth:
                report.count_skip(SkipReason.DEPTH_LIMIT)
                ctx.emit(
                    DiagnosticKind.DEPTH_LIMIT,
                    f"abandoned branch at depth {depth + 1} (max {ctx.max_depth})",
                    depth,
                    logging.WARNING,
                )
                continue
            ctx.emit(DiagnosticKind.NESTED_MULTIPART, f"boundary {outcome.boundary[:40]}", depth)
            walk_multipart(ctx, part.body_start, part.body_end, outcome.boundary, depth + 1)

        elif outcome.kind is OutcomeKind.ATTACHMENT:
            attachment = outcome.attachment
            if ctx.is_full:
                ctx.skip(SkipReason.COUNT_LIMIT, depth, attachment.filename, logging.WARNING)
                continue
            ctx.add(attachment, depth)
            inspect_attachment(ctx, attachment, depth)

        else:
            level = logging.WARNING if outcome.reason in (
                SkipReason.BASE64_DECODE_FAILED, SkipReason.SIZE_LIMIT
            ) else logging.DEBUG
            ctx.skip(outcome.reason, depth, outcome.detail, level)

    ctx.emit(DiagnosticKind.MULTIPART_SPLIT, f"{count} parts with boundary {boundary[:40]}", depth)
