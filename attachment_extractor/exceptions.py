# ============================================================================
# attachment_extractor/exceptions.py
# ============================================================================
"""
Exceptions for the attachment extractor's outer surfaces.

The extraction engine itself never raises: it degrades to an empty result and
reports through the diagnostic channel. These types are raised by
configuration validation, the CLI and the HTTP adapters.
"""

from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class AttachmentExtractorError(Exception):
    """Base exception for all attachment extractor errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 original_exception: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_msg = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base_msg} (Details: {details_str})"
        return base_msg


class ConfigurationError(AttachmentExtractorError):
    """Raised when configuration is invalid."""
    pass


class InputValidationError(AttachmentExtractorError):
    """Raised when a request or CLI input cannot be turned into message bytes."""
    pass


class FileProcessingError(AttachmentExtractorError):
    """Raised when reading a message file or writing an attachment fails."""
    pass


def wrap_processing_error(original_error: Exception, context: str,
                          details: Optional[Dict[str, Any]] = None) -> AttachmentExtractorError:
    """
    Convert generic exceptions to the matching AttachmentExtractorError type.

    Args:
        original_error: The original exception that occurred
        context: Context string describing where the error occurred
        details: Additional details about the error

    Returns:
        Appropriate AttachmentExtractorError subclass
    """
    enhanced_details = {
        "original_error_type": type(original_error).__name__,
        "context": context,
        **(details or {})
    }
    error_msg = str(original_error)

    if isinstance(original_error, AttachmentExtractorError):
        return original_error
    if isinstance(original_error, OSError):
        return FileProcessingError(
            f"File processing failed in {context}: {error_msg}",
            enhanced_details,
            original_error
        )
    if isinstance(original_error, (ValueError, TypeError)):
        return InputValidationError(
            f"Invalid input in {context}: {error_msg}",
            enhanced_details,
            original_error
        )
    return AttachmentExtractorError(
        f"Unexpected error in {context}: {error_msg}",
        enhanced_details,
        original_error
    )


def raise_message_unreadable(path: str, reason: str):
    """Raise FileProcessingError for a message file that cannot be read."""
    raise FileProcessingError(
        f"Cannot read message file '{path}'",
        {
            "file_path": path,
            "reason": reason,
            "error_type": "unreadable_message"
        }
    )
