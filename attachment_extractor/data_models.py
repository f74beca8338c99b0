# ============================================================================
# attachment_extractor/data_models.py
# ============================================================================
"""
Typed data models for the attachment extractor.

``ExtractedAttachment`` is the only type callers normally see. The remaining
models are per-call intermediates: header blocks and message parts reference
spans of the caller's buffer instead of copying it at every nesting level.
"""

import base64
import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# Lower-cased header name -> folded, whitespace-normalised value
HeaderMap = Dict[str, str]


@dataclass(frozen=True)
class ExtractedAttachment:
    """
    A decoded attachment.

    Attributes:
        filename: Decoded filename, never empty
        mime_type: ``type/subtype`` from Content-Type, parameters stripped
        data: Decoded content
        content_id: Raw Content-ID header value, if the part had one
    """
    filename: str
    mime_type: str
    data: bytes = field(repr=False)
    content_id: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def sha256(self) -> str:
        """Content hash used by persistence layers to deduplicate attachments."""
        return hashlib.sha256(self.data).hexdigest()

    @property
    def extension(self) -> str:
        _, dot, ext = self.filename.rpartition(".")
        return f".{ext.lower()}" if dot and ext else ""

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "filename": self.filename,
            "mime_type": self.mime_type,
            "size": self.size,
            "sha256": self.sha256,
            "content_id": self.content_id,
        }
        if include_content:
            result["content_base64"] = base64.b64encode(self.data).decode("ascii")
        return result


@dataclass(frozen=True)
class HeaderBlock:
    """Result of header parsing over a byte range.

    ``body_start`` is ``None`` when the range has no blank line ending the
    header block, i.e. there is no body.
    """
    headers: HeaderMap
    body_start: Optional[int]


@dataclass(frozen=True)
class MessagePart:
    """A multipart node: its headers plus the ``[body_start, body_end)`` span of its body."""
    headers: HeaderMap
    body_start: int
    body_end: int

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def disposition(self) -> str:
        return self.headers.get("content-disposition", "")

    @property
    def transfer_encoding(self) -> str:
        return self.headers.get("content-transfer-encoding", "")

    @property
    def content_id(self) -> Optional[str]:
        return self.headers.get("content-id")


class SkipReason(Enum):
    """Why a candidate part produced no attachment."""
    NO_HEADERS = "no_headers"
    NO_BOUNDARY = "no_boundary"
    NOT_ATTACHMENT = "not_attachment"
    UNSUPPORTED_ENCODING = "unsupported_encoding"
    BASE64_DECODE_FAILED = "base64_decode_failed"
    EMPTY_PAYLOAD = "empty_payload"
    DEPTH_LIMIT = "depth_limit"
    SIZE_LIMIT = "size_limit"
    COUNT_LIMIT = "count_limit"


class OutcomeKind(Enum):
    ATTACHMENT = "attachment"
    NESTED = "nested"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PartOutcome:
    """Tagged result of classifying one candidate part."""
    kind: OutcomeKind
    attachment: Optional[ExtractedAttachment] = None
    part: Optional[MessagePart] = None
    boundary: Optional[str] = None
    reason: Optional[SkipReason] = None
    detail: str = ""

    @classmethod
    def emitted(cls, attachment: ExtractedAttachment) -> "PartOutcome":
        return cls(OutcomeKind.ATTACHMENT, attachment=attachment)

    @classmethod
    def nested(cls, part: MessagePart, boundary: str) -> "PartOutcome":
        return cls(OutcomeKind.NESTED, part=part, boundary=boundary)

    @classmethod
    def skipped(cls, reason: SkipReason, detail: str = "") -> "PartOutcome":
        return cls(OutcomeKind.SKIPPED, reason=reason, detail=detail)


@dataclass
class PdfCheckResult:
    """Advisory structural findings for a PDF payload."""
    filename: str = ""
    has_signature: bool = False
    has_eof_marker: bool = False
    startxref: Optional[int] = None
    startxref_valid: Optional[bool] = None
    parse_ok: Optional[bool] = None
    parse_error: Optional[str] = None

    @property
    def looks_intact(self) -> bool:
        return (
            self.has_signature
            and self.has_eof_marker
            and self.startxref_valid is not False
            and self.parse_ok is not False
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "has_signature": self.has_signature,
            "has_eof_marker": self.has_eof_marker,
            "startxref": self.startxref,
            "startxref_valid": self.startxref_valid,
            "parse_ok": self.parse_ok,
            "parse_error": self.parse_error,
            "looks_intact": self.looks_intact,
        }


@dataclass
class ExtractionReport:
    """Counters gathered while extracting one message."""
    parts_seen: int = 0
    max_depth_seen: int = 0
    skipped: Dict[str, int] = field(default_factory=dict)
    pdf_checks: List[PdfCheckResult] = field(default_factory=list)
    content_type_mismatches: List[str] = field(default_factory=list)
    message_rejected: Optional[str] = None

    def count_skip(self, reason: SkipReason) -> None:
        self.skipped[reason.value] = self.skipped.get(reason.value, 0) + 1

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parts_seen": self.parts_seen,
            "max_depth_seen": self.max_depth_seen,
            "skipped": dict(self.skipped),
            "total_skipped": self.total_skipped,
            "pdf_checks": [check.to_dict() for check in self.pdf_checks],
            "content_type_mismatches": list(self.content_type_mismatches),
            "message_rejected": self.message_rejected,
        }


@dataclass
class ExtractionResult:
    """Attachments plus the report describing how they were found."""
    attachments: List[ExtractedAttachment] = field(default_factory=list)
    report: ExtractionReport = field(default_factory=ExtractionReport)

    def to_dict(self, include_content: bool = False) -> Dict[str, Any]:
        return {
            "attachments": [a.to_dict(include_content) for a in self.attachments],
            "total_attachments": len(self.attachments),
            "report": self.report.to_dict(),
        }


def unique_by_content(attachments: List[ExtractedAttachment]) -> List[ExtractedAttachment]:
    """Drop attachments whose content hash was already seen, keeping document order."""
    seen = set()
    unique = []
    for attachment in attachments:
        digest = attachment.sha256
        if digest in seen:
            continue
        seen.add(digest)
        unique.append(attachment)
    return unique
