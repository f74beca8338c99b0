# ============================================================================
# attachment_extractor/processing/content_sniffer.py
# ============================================================================
"""Magic-byte content type sniffing for decoded attachments."""

OCTET_STREAM = "application/octet-stream"

# (signature, mime type); checked in order against the leading bytes
MAGIC_SIGNATURES = (
    (b"\xFF\xD8\xFF", "image/jpeg"),
    (b"\x89PNG", "image/png"),
    (b"GIF8", "image/gif"),
    (b"%PDF", "application/pdf"),
    (b"PK\x03\x04", "application/zip"),
    (b"PK\x05\x06", "application/zip"),
    (b"Rar!", "application/x-rar-compressed"),
    (b"MZ", "application/x-msdownload"),
)

DANGEROUS_TYPES = ("application/x-msdownload", "application/x-executable")


def sniff_content_type(data: bytes) -> str:
    """Guess a MIME type from the first bytes of ``data``."""
    if len(data) < 4:
        return OCTET_STREAM
    for signature, mime_type in MAGIC_SIGNATURES:
        if data.startswith(signature):
            return mime_type
    return OCTET_STREAM


def is_dangerous_mismatch(declared: str, detected: str) -> bool:
    """True when an executable is declared as something else."""
    declared = declared.lower()
    if any(t in detected for t in DANGEROUS_TYPES):
        return not any(t in declared for t in DANGEROUS_TYPES)
    return False
