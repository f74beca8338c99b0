# ============================================================================
# attachment_extractor/__init__.py
# ============================================================================
"""
MIME Attachment Extractor

Recovers attached files from raw RFC 5322 messages, tolerating folded headers,
nested multipart bodies and malformed metadata.
"""

from .config_manager import ExtractorConfiguration, get_default_config, get_config_from_env, get_azure_config
from .data_models import ExtractedAttachment, ExtractionReport, ExtractionResult, unique_by_content
from .diagnostics import CollectingDiagnosticSink, DiagnosticEvent, DiagnosticKind, LoggingDiagnosticSink
from .exceptions import AttachmentExtractorError, ConfigurationError, FileProcessingError, InputValidationError
from .extractor import AttachmentExtractor, extract, extract_with_report

__version__ = "1.0.0"

__all__ = [
    "extract",
    "extract_with_report",
    "AttachmentExtractor",
    "ExtractedAttachment",
    "ExtractionReport",
    "ExtractionResult",
    "unique_by_content",
    "ExtractorConfiguration",
    "get_default_config",
    "get_config_from_env",
    "get_azure_config",
    "DiagnosticEvent",
    "DiagnosticKind",
    "CollectingDiagnosticSink",
    "LoggingDiagnosticSink",
    "AttachmentExtractorError",
    "ConfigurationError",
    "FileProcessingError",
    "InputValidationError",
]
