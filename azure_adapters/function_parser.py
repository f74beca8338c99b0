# ============================================================================
# azure_adapters/function_parser.py
# ============================================================================
"""
Azure Function adapter for the attachment extractor.
Turns HTTP requests into message bytes and extraction results into JSON.
"""

import base64
import binascii
import logging
import time
from dataclasses import dataclass
from typing import Optional

import azure.functions as func

from attachment_extractor import __version__
from attachment_extractor.config_manager import get_azure_config
from attachment_extractor.exceptions import InputValidationError
from attachment_extractor.extractor import AttachmentExtractor
from .error_handler import handle_function_error
from .response_formatter import format_extraction_response

logger = logging.getLogger(__name__)

# Global extractor instance for cold start optimization
_global_extractor: Optional[AttachmentExtractor] = None

EMAIL_FIELDS = ('email_data', 'data', 'email_content')
TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class ExtractRequest:
    email_data: bytes
    filename: str
    include_content: bool


def get_extractor() -> AttachmentExtractor:
    """Get or create the shared extractor."""
    global _global_extractor

    if _global_extractor is None:
        logger.info("Initializing attachment extractor")
        _global_extractor = AttachmentExtractor(get_azure_config())
    return _global_extractor


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').lower() in TRUE_VALUES


def parse_request_data(req: func.HttpRequest) -> ExtractRequest:
    """
    Parse request data supporting two input formats.

    Supports:
    1. JSON with base64 encoded email data
    2. Raw email data in request body
    """
    content_type = (req.headers.get('content-type') or '').lower()

    if 'application/json' in content_type:
        try:
            json_data = req.get_json()
        except ValueError as e:
            raise InputValidationError(f"Invalid JSON request: {e}", {"error_type": "invalid_json"}, e)
        if not isinstance(json_data, dict) or not json_data:
            raise InputValidationError("Empty JSON body", {"error_type": "empty_body"})

        field_name = next((f for f in EMAIL_FIELDS if f in json_data), None)
        if field_name is None:
            raise InputValidationError(
                "JSON must contain 'email_data', 'data', or 'email_content' field with base64 encoded email",
                {"accepted_fields": list(EMAIL_FIELDS)}
            )
        encoded = json_data[field_name]
        if isinstance(encoded, str):
            # wrapped base64 (76 column lines) is accepted
            encoded = "".join(encoded.split())
        try:
            email_data = base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError, ValueError) as e:
            raise InputValidationError(
                f"Field '{field_name}' is not valid base64", {"field": field_name}, e
            )

        return ExtractRequest(
            email_data=email_data,
            filename=json_data.get('filename', 'email.eml'),
            include_content=_flag(json_data.get('include_content', False)),
        )

    email_data = req.get_body()
    if not email_data:
        raise InputValidationError("Request body is empty", {"error_type": "empty_body"})

    return ExtractRequest(
        email_data=email_data,
        filename=req.headers.get('x-filename') or req.params.get('filename', 'email.eml'),
        include_content=_flag(req.params.get('include_content')),
    )


def handle_extract_request(req: func.HttpRequest,
                           extractor: Optional[AttachmentExtractor] = None) -> func.HttpResponse:
    """Run one extraction request end to end."""
    start_time = time.time()
    try:
        request = parse_request_data(req)
        logger.info(f"Extracting attachments from {request.filename} ({len(request.email_data)} bytes)")

        result = (extractor or get_extractor()).extract_with_report(request.email_data)

        logger.info(f"Extracted {len(result.attachments)} attachments from {request.filename}")
        return format_extraction_response(
            result, request.filename, time.time() - start_time, request.include_content
        )

    except Exception as e:
        return handle_function_error(e, "extract_attachments")


def health_payload(extractor: Optional[AttachmentExtractor] = None) -> dict:
    """Service description and effective limits for the health endpoint."""
    config = (extractor or get_extractor()).config
    return {
        "status": "healthy",
        "service": {
            "name": "mime-attachment-extractor",
            "version": __version__,
        },
        "endpoints": [
            "POST /api/extract",
            "GET  /api/health",
        ],
        "features": {
            "pdf_structure_check": config.processing.validate_pdf_structure,
            "deep_pdf_check": config.processing.deep_pdf_check,
            "content_sniffing": config.processing.sniff_content_types,
            "content_deduplication": config.processing.enable_deduplication,
        },
        "limits": {
            "max_nested_depth": config.security.max_nested_depth,
            "max_message_size_mb": config.security.max_message_size_mb,
            "max_attachment_size_mb": config.security.max_attachment_size_mb,
            "max_attachments": config.security.max_attachments,
        },
    }
