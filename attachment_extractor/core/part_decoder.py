# =============================================================
# part_decoder.py
# =============================================================
"""Classification and decoding of a single multipart segment.

:func:`classify_part` never raises. It returns a tagged
:class:`~attachment_extractor.data_models.PartOutcome`: an attachment, a
nested multipart to descend into, or a skip with its reason.
"""
from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional

from ..data_models import ExtractedAttachment, MessagePart, PartOutcome, SkipReason
from ..diagnostics import DiagnosticKind
from ..processing.content_sniffer import is_dangerous_mismatch, sniff_content_type
from ..processing.pdf_utils import describe, is_pdf_filename, validate_pdf_structure
from .boundary import resolve_boundary
from .context import ExtractionContext
from .filename_decoder import resolve_filename
from .header_parser import parse_headers


def primary_mime_type(content_type: str, default: str = "application/octet-stream") -> str:
    """``type/subtype`` of a Content-Type value, lower-cased, parameters dropped."""
    token = content_type.split(";", 1)[0].strip().lower()
    return token if "/" in token else default


def is_attachment(part: MessagePart) -> bool:
    disposition = part.disposition.lower()
    mime_type = primary_mime_type(part.content_type, "")
    return (
        "attachment" in disposition
        or mime_type.startswith("application/")
        or (mime_type.startswith("image/") and "attachment" in disposition)
    )


def skip_delimiter_line_break(data: bytes, start: int, end: int) -> int:
    """Advance past transport padding and the single line break ending a delimiter line."""
    while start < end and data[start] in b" \t":
        start += 1
    if data.startswith(b"\r\n", start, end):
        return start + 2
    if start < end and data[start] in b"\r\n":
        return start + 1
    return start


def decode_base64_body(data: bytes, start: int, end: int) -> Optional[bytes]:
    """Decode a base64 body, ignoring blank lines, delimiter look-alikes and stray characters.

    Returns ``None`` when the remaining text is not decodable.
    """
    lines = (line.strip() for line in data[start:end].split(b"\n"))
    joined = b"".join(line for line in lines if line and not line.startswith(b"--"))
    try:
        return base64.b64decode(joined, validate=False)
    except (binascii.Error, ValueError):
        return None


def classify_part(ctx: ExtractionContext, start: int, end: int, depth: int) -> PartOutcome:
    """Parse ``ctx.data[start:end]`` as one body part and decide what it is."""
    data = ctx.data
    start = skip_delimiter_line_break(data, start, end)

    block = parse_headers(data, start, end)
    if not block.headers:
        return PartOutcome.skipped(SkipReason.NO_HEADERS)

    body_start = end if block.body_start is None else block.body_start
    part = MessagePart(block.headers, body_start, end)
    content_type = part.content_type

    if "multipart/" in content_type.lower():
        boundary = resolve_boundary(content_type)
        if boundary is None:
            return PartOutcome.skipped(SkipReason.NO_BOUNDARY, content_type)
        return PartOutcome.nested(part, boundary)

    if not is_attachment(part):
        return PartOutcome.skipped(SkipReason.NOT_ATTACHMENT, content_type or "no content-type")

    processing = ctx.config.processing
    filename = resolve_filename(part.disposition, content_type) or processing.default_filename

    encoding = part.transfer_encoding.lower()
    if "base64" not in encoding:
        return PartOutcome.skipped(
            SkipReason.UNSUPPORTED_ENCODING, f"{filename} ({encoding or '7bit'})"
        )

    payload = decode_base64_body(data, part.body_start, part.body_end)
    if payload is None:
        return PartOutcome.skipped(SkipReason.BASE64_DECODE_FAILED, filename)
    if not payload:
        return PartOutcome.skipped(SkipReason.EMPTY_PAYLOAD, filename)

    limit = ctx.config.security.max_attachment_size_bytes
    if len(payload) > limit:
        return PartOutcome.skipped(
            SkipReason.SIZE_LIMIT, f"{filename} ({len(payload):,} bytes > {limit:,} limit)"
        )

    return PartOutcome.emitted(ExtractedAttachment(
        filename=filename,
        mime_type=primary_mime_type(content_type, processing.default_mime_type),
        data=payload,
        content_id=part.content_id,
    ))


def inspect_attachment(ctx: ExtractionContext, attachment: ExtractedAttachment, depth: int) -> None:
    """Run the advisory checks on an emitted attachment. Output is never altered."""
    processing = ctx.config.processing

    if processing.validate_pdf_structure and is_pdf_filename(attachment.filename):
        result = validate_pdf_structure(attachment.data, deep=processing.deep_pdf_check)
        result.filename = attachment.filename
        ctx.report.pdf_checks.append(result)
        ctx.emit(
            DiagnosticKind.PDF_CHECK,
            f"{attachment.filename}: {describe(result, attachment.size)}",
            depth,
            logging.DEBUG if result.looks_intact else logging.WARNING,
            intact=result.looks_intact,
        )

    if processing.sniff_content_types:
        detected = sniff_content_type(attachment.data)
        if is_dangerous_mismatch(attachment.mime_type, detected):
            ctx.report.content_type_mismatches.append(attachment.filename)
            ctx.emit(
                DiagnosticKind.CONTENT_TYPE_MISMATCH,
                f"{attachment.filename}: declared {attachment.mime_type}, content looks like {detected}",
                depth,
                logging.WARNING,
                declared=attachment.mime_type,
                detected=detected,
            )
