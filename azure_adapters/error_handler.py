# ============================================================================
# azure_adapters/error_handler.py
# ============================================================================

"""
Centralized error handling for Azure Functions.
"""

import logging
import azure.functions as func
from attachment_extractor.exceptions import (
    AttachmentExtractorError,
    ConfigurationError,
    FileProcessingError,
    InputValidationError
)
from .response_formatter import format_error_response

logger = logging.getLogger(__name__)


def handle_function_error(error: Exception, function_name: str) -> func.HttpResponse:
    """
    Handle errors in Azure Functions with appropriate HTTP status codes.

    Args:
        error: The exception that occurred
        function_name: Name of the function where error occurred

    Returns:
        Formatted HTTP error response
    """

    logger.error(f"Error in {function_name}: {str(error)}", exc_info=True)

    if isinstance(error, InputValidationError):
        return format_error_response(
            error_message=error.message,
            status_code=400,
            error_code="INVALID_INPUT",
            details=error.details
        )

    elif isinstance(error, FileProcessingError):
        return format_error_response(
            error_message=error.message,
            status_code=400,
            error_code="FILE_PROCESSING_ERROR",
            details=error.details
        )

    elif isinstance(error, ConfigurationError):
        return format_error_response(
            error_message=error.message,
            status_code=500,
            error_code="CONFIGURATION_ERROR"
        )

    elif isinstance(error, AttachmentExtractorError):
        return format_error_response(
            error_message=error.message,
            status_code=500,
            error_code="EXTRACTOR_ERROR",
            details=error.details
        )

    elif isinstance(error, ValueError):
        return format_error_response(
            error_message="Invalid input data",
            status_code=400,
            error_code="INVALID_INPUT"
        )

    elif isinstance(error, MemoryError):
        return format_error_response(
            error_message="Insufficient memory to process request",
            status_code=507,
            error_code="MEMORY_ERROR"
        )

    else:
        return format_error_response(
            error_message="An unexpected error occurred",
            status_code=500,
            error_code="INTERNAL_ERROR"
        )
