# ============================================================================
# attachment_extractor/processing/pdf_utils.py
# ============================================================================
"""PDF structural sanity checks.

The checks are advisory: they surface corrupted documents in diagnostics but
never change what the extractor returns.
"""

import io
import re

from pdfminer.pdfdocument import PDFDocument
from pdfminer.pdfparser import PDFParser

from ..data_models import PdfCheckResult

PDF_SIGNATURE = b"%PDF-"
EOF_MARKER = b"%%EOF"
EOF_SEARCH_WINDOW = 1024
STARTXREF = re.compile(rb"startxref\s*(\d+)")


def is_pdf_filename(filename: str) -> bool:
    return filename.lower().endswith(".pdf")


def find_startxref(pdf_data: bytes):
    """Return the offset named by the last ``startxref`` marker, or ``None``."""
    marker = pdf_data.rfind(b"startxref")
    if marker == -1:
        return None
    match = STARTXREF.match(pdf_data, marker)
    if not match:
        return None
    return int(match.group(1))


def open_with_pdfminer(pdf_data: bytes) -> PdfCheckResult:
    """Try to load the cross-reference table with pdfminer."""
    result = PdfCheckResult()
    try:
        parser = PDFParser(io.BytesIO(pdf_data))
        PDFDocument(parser)
        result.parse_ok = True
    except Exception as e:
        result.parse_ok = False
        result.parse_error = f"{type(e).__name__}: {e}"
    return result


def validate_pdf_structure(pdf_data: bytes, deep: bool = False) -> PdfCheckResult:
    """Check signature, trailing ``%%EOF`` and the ``startxref`` bound.

    Args:
        pdf_data: Decoded attachment bytes
        deep: Also open the document with pdfminer

    Returns:
        PdfCheckResult with one field per check
    """
    result = open_with_pdfminer(pdf_data) if deep else PdfCheckResult()

    result.has_signature = pdf_data.startswith(PDF_SIGNATURE)
    result.has_eof_marker = EOF_MARKER in pdf_data[-EOF_SEARCH_WINDOW:]

    startxref = find_startxref(pdf_data)
    if startxref is not None:
        result.startxref = startxref
        result.startxref_valid = startxref < len(pdf_data)

    return result


def describe(result: PdfCheckResult, size: int) -> str:
    """One-line summary for diagnostics."""
    parts = [
        f"signature={result.has_signature}",
        f"eof={result.has_eof_marker}",
    ]
    if result.startxref is not None:
        parts.append(f"startxref={result.startxref}/{size} valid={result.startxref_valid}")
    if result.parse_ok is not None:
        parts.append(f"pdfminer={'ok' if result.parse_ok else result.parse_error}")
    return ", ".join(parts)
