# =============================================================
# context.py
# =============================================================
"""Per-call state shared by the walker and the part decoder."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from ..config_manager import ExtractorConfiguration
from ..data_models import ExtractedAttachment, ExtractionReport, SkipReason
from ..diagnostics import DiagnosticEvent, DiagnosticKind, DiagnosticSink


@dataclass
class ExtractionContext:
    """Everything one ``extract()`` call accumulates.

    A fresh context is built per call, so concurrent extractions share nothing.
    """
    data: bytes
    config: ExtractorConfiguration
    sink: DiagnosticSink
    attachments: List[ExtractedAttachment] = field(default_factory=list)
    report: ExtractionReport = field(default_factory=ExtractionReport)

    @property
    def max_depth(self) -> int:
        return self.config.security.max_nested_depth

    @property
    def is_full(self) -> bool:
        return len(self.attachments) >= self.config.security.max_attachments

    def emit(self, kind: DiagnosticKind, message: str, depth: int = 0,
             level: int = logging.DEBUG, **data) -> None:
        self.sink.emit(DiagnosticEvent(kind, message, depth, level, data))

    def skip(self, reason: SkipReason, depth: int, detail: str = "",
             level: int = logging.DEBUG) -> None:
        self.report.count_skip(reason)
        message = f"{reason.value}: {detail}" if detail else reason.value
        self.emit(DiagnosticKind.PART_SKIPPED, message, depth, level, reason=reason)

    def add(self, attachment: ExtractedAttachment, depth: int) -> None:
        self.attachments.append(attachment)
        if self.config.logging.log_attachments:
            self.emit(
                DiagnosticKind.ATTACHMENT_EXTRACTED,
                f"{attachment.filename} ({attachment.mime_type}, {attachment.size} bytes)",
                depth,
                logging.INFO,
                filename=attachment.filename,
            )
