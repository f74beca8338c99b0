# ============================================================================
# attachment_extractor/extractor.py
# ============================================================================
"""
Attachment extraction entry point.

``extract()`` takes a complete RFC 5322 message as bytes or text and returns
the attachments it carries. It never raises: unreadable input, a
non-multipart message or a missing boundary all yield an empty list, and the
reasons go to the diagnostic sink instead.
"""

import logging
from typing import List, Optional, Union

from .config_manager import ExtractorConfiguration, get_default_config
from .core.boundary import is_multipart, resolve_boundary
from .core.context import ExtractionContext
from .core.header_parser import parse_headers
from .core.mime_walker import walk_multipart
from .data_models import ExtractedAttachment, ExtractionResult, unique_by_content
from .diagnostics import DiagnosticKind, DiagnosticSink, LoggingDiagnosticSink

logger = logging.getLogger(__name__)

RawMessage = Union[bytes, bytearray, memoryview, str]


def message_bytes(raw: RawMessage) -> Optional[bytes]:
    """Return the message as bytes: text is encoded as UTF-8, or Latin-1 when that fails."""
    if isinstance(raw, str):
        try:
            return raw.encode("utf-8")
        except UnicodeEncodeError:
            pass
        try:
            return raw.encode("latin-1")
        except UnicodeEncodeError:
            return None
    return bytes(raw)


class AttachmentExtractor:
    """
    Reusable extractor bound to one configuration and diagnostic sink.

    The instance keeps no per-message state, so one extractor can serve
    concurrent callers.
    """

    def __init__(self, config: Optional[ExtractorConfiguration] = None,
                 diagnostics: Optional[DiagnosticSink] = None):
        self.config = config or get_default_config()
        self.diagnostics = diagnostics or LoggingDiagnosticSink(
            max_message_length=self.config.logging.max_log_message_length
        )

    def extract(self, raw: RawMessage) -> List[ExtractedAttachment]:
        """Return every attachment in ``raw``, in document order."""
        return self.extract_with_report(raw).attachments

    def extract_with_report(self, raw: RawMessage) -> ExtractionResult:
        """Like :meth:`extract`, also returning the counters gathered on the way."""
        data = message_bytes(raw)
        ctx = ExtractionContext(data=data or b"", config=self.config, sink=self.diagnostics)

        if data is None:
            ctx.report.message_rejected = "undecodable text"
            ctx.emit(DiagnosticKind.NOT_MULTIPART, "message text is neither UTF-8 nor Latin-1", 0, logging.WARNING)
            return ExtractionResult([], ctx.report)

        try:
            self._run(ctx)
        except Exception as e:
            # keep whatever was found before the failure
            logger.error("Unexpected error during attachment extraction: %s", e, exc_info=True)
            ctx.report.message_rejected = f"{type(e).__name__}: {e}"

        attachments = ctx.attachments
        if self.config.processing.enable_deduplication:
            attachments = unique_by_content(attachments)

        ctx.emit(
            DiagnosticKind.SUMMARY,
            f"{len(attachments)} attachments, {ctx.report.parts_seen} parts, "
            f"{ctx.report.total_skipped} skipped",
            0,
            logging.INFO,
        )
        return ExtractionResult(list(attachments), ctx.report)

    def _run(self, ctx: ExtractionContext) -> None:
        data = ctx.data
        limit = self.config.security.max_message_size_bytes
        if len(data) > limit:
            ctx.report.message_rejected = f"message too large ({len(data):,} bytes > {limit:,} limit)"
            ctx.emit(DiagnosticKind.MESSAGE_TOO_LARGE, ctx.report.message_rejected, 0, logging.WARNING)
            return

        block = parse_headers(data)
        content_type = block.headers.get("content-type", "")
        if not is_multipart(content_type):
            ctx.emit(DiagnosticKind.NOT_MULTIPART, f"content-type {content_type or 'missing'!r}")
            return

        boundary = resolve_boundary(content_type)
        if boundary is None:
            ctx.emit(DiagnosticKind.NO_BOUNDARY, f"no boundary in {content_type!r}", 0, logging.WARNING)
            return

        if block.body_start is None:
            ctx.emit(DiagnosticKind.NOT_MULTIPART, "header block is not terminated, no body")
            return

        walk_multipart(ctx, block.body_start, len(data), boundary, 0)


def extract(raw: RawMessage, config: Optional[ExtractorConfiguration] = None,
            diagnostics: Optional[DiagnosticSink] = None) -> List[ExtractedAttachment]:
    """
    Extract all attachments from a raw RFC 5322 message.

    Args:
        raw: Complete message (headers and body) as bytes or text
        config: Optional configuration, defaults to :func:`get_default_config`
        diagnostics: Optional sink receiving diagnostic events

    Returns:
        Attachments in document order; empty when none were found

    Example:
        >>> attachments = extract(open("mail.eml", "rb").read())
        >>> [(a.filename, a.mime_type, a.size) for a in attachments]
        [('invoice.pdf', 'application/pdf', 48213)]
    """
    return AttachmentExtractor(config, diagnostics).extract(raw)


def extract_with_report(raw: RawMessage, config: Optional[ExtractorConfiguration] = None,
                        diagnostics: Optional[DiagnosticSink] = None) -> ExtractionResult:
    """Extract attachments and return them together with an :class:`ExtractionReport`."""
    return AttachmentExtractor(config, diagnostics).extract_with_report(raw)
