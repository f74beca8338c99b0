#!/usr/bin/env python3
"""
Azure Function App for the MIME attachment extractor.

POST a raw RFC 5322 message (or JSON with base64 ``email_data``) to
``/api/extract`` and receive the decoded attachment list as JSON.
"""

import json
import logging
import time

import azure.functions as func

from azure_adapters.function_parser import handle_extract_request, health_payload

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("AttachmentExtractorFunction")

# Initialize function app
app = func.FunctionApp(http_auth_level=func.AuthLevel.FUNCTION)


@app.function_name("extract_attachments")
@app.route(methods=["POST"], route="extract")
def extract_attachments(req: func.HttpRequest) -> func.HttpResponse:
    """
    Attachment extraction endpoint.

    Request Body (JSON):
    {
        "email_data": "base64_encoded_email_content",
        "filename": "optional_filename.eml",
        "include_content": false
    }

    or the raw message with any non-JSON content type
    (``?include_content=true`` to embed attachment bytes).

    Response:
    {
        "success": true,
        "timestamp": "...",
        "data": {"attachments": [...], "total_attachments": 1, "report": {...}}
    }
    """
    logger.info("Processing attachment extraction request")
    return handle_extract_request(req)


@app.function_name("health_check")
@app.route(methods=["GET"], route="health")
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint for monitoring."""
    try:
        health_data = health_payload()
        health_data["timestamp"] = time.time()
        return func.HttpResponse(
            json.dumps(health_data, indent=2),
            status_code=200,
            mimetype="application/json"
        )

    except Exception as e:
        logger.error(f"Health check failed: {e}", exc_info=True)
        return func.HttpResponse(
            json.dumps({
                "status": "unhealthy",
                "timestamp": time.time(),
                "error": str(e)
            }, indent=2),
            status_code=503,
            mimetype="application/json"
        )
