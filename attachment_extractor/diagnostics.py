# ============================================================================
# attachment_extractor/diagnostics.py
# ============================================================================
"""
Diagnostic channel for the extraction engine.

The parsing code never logs or prints directly. It emits
:class:`DiagnosticEvent` objects into an injected sink; the default sink
forwards them to :mod:`logging`, tests use :class:`CollectingDiagnosticSink`.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    NOT_MULTIPART = "not_multipart"
    NO_BOUNDARY = "no_boundary"
    MESSAGE_TOO_LARGE = "message_too_large"
    MULTIPART_SPLIT = "multipart_split"
    PART_SKIPPED = "part_skipped"
    NESTED_MULTIPART = "nested_multipart"
    DEPTH_LIMIT = "depth_limit"
    ATTACHMENT_EXTRACTED = "attachment_extracted"
    PDF_CHECK = "pdf_check"
    CONTENT_TYPE_MISMATCH = "content_type_mismatch"
    SUMMARY = "summary"


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: DiagnosticKind
    message: str
    depth: int = 0
    level: int = logging.DEBUG
    data: Dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class DiagnosticSink(Protocol):
    """Anything that accepts diagnostic events."""

    def emit(self, event: DiagnosticEvent) -> None:
        ...


class LoggingDiagnosticSink:
    """Forward events to a :class:`logging.Logger`, indented by nesting depth."""

    def __init__(self, target: logging.Logger = logger, max_message_length: int = 200):
        self.target = target
        self.max_message_length = max_message_length

    def emit(self, event: DiagnosticEvent) -> None:
        message = event.message
        if len(message) > self.max_message_length:
            message = message[:self.max_message_length] + "..."
        self.target.log(event.level, "%s[%s] %s", "  " * event.depth, event.kind.value, message)


class CollectingDiagnosticSink:
    """Keep every event in memory."""

    def __init__(self):
        self.events: List[DiagnosticEvent] = []

    def emit(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: DiagnosticKind) -> List[DiagnosticEvent]:
        return [e for e in self.events if e.kind is kind]


class MultiSink:
    """Fan one event out to several sinks."""

    def __init__(self, *sinks: DiagnosticSink):
        self.sinks = sinks

    def emit(self, event: DiagnosticEvent) -> None:
        for sink in self.sinks:
            sink.emit(event)
