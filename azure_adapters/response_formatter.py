# ============================================================================
# azure_adapters/response_formatter.py
# ============================================================================

"""
JSON envelopes for the extraction endpoints.

Every response body is ``{"success": bool, "timestamp": iso8601, ...}`` with
either ``data`` or ``error`` beside it.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import azure.functions as func

from attachment_extractor.data_models import ExtractionResult

JSON_HEADERS = {
    "Content-Type": "application/json",
    "X-Content-Type-Options": "nosniff",
    "Cache-Control": "no-store",
}


def _envelope(success: bool, **payload) -> str:
    body = {"success": success, "timestamp": datetime.now(timezone.utc).isoformat(), **payload}
    return json.dumps(body, default=str, ensure_ascii=False, indent=2)


def format_extraction_response(result: ExtractionResult, source: str,
                               processing_time: float, include_content: bool = False) -> func.HttpResponse:
    """
    Wrap an extraction result for the HTTP caller.

    Args:
        result: Attachments and report from the extractor
        source: Name the caller gave the message
        processing_time: Wall-clock seconds spent on the request
        include_content: Embed base64 attachment bytes

    Returns:
        200 response; the attachment count is repeated in ``X-Attachment-Count``
    """
    data = result.to_dict(include_content=include_content)
    data["source"] = source
    data["processing_time_seconds"] = round(processing_time, 4)

    headers = dict(JSON_HEADERS)
    headers["X-Attachment-Count"] = str(len(result.attachments))
    return func.HttpResponse(_envelope(True, data=data), status_code=200, headers=headers)


def format_error_response(
    error_message: str,
    status_code: int = 500,
    error_code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> func.HttpResponse:
    """Format error response."""
    error = {"message": error_message, "code": error_code, "details": details}
    return func.HttpResponse(
        _envelope(False, error=error),
        status_code=status_code,
        headers=JSON_HEADERS
    )
