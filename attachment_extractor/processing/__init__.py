# attachment_extractor/processing/__init__.py
"""Advisory checks on decoded attachments."""
from .content_sniffer import is_dangerous_mismatch, sniff_content_type
from .pdf_utils import validate_pdf_structure

__all__ = [
    "validate_pdf_structure",
    "sniff_content_type",
    "is_dangerous_mismatch",
]
