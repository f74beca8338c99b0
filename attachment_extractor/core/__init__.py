"""Core MIME parsing modules."""
from .boundary import resolve_boundary
from .filename_decoder import decode_encoded_words, resolve_filename
from .header_parser import parse_headers
from .mime_walker import walk_multipart
from .part_decoder import classify_part

__all__ = [
    "parse_headers",
    "resolve_boundary",
    "walk_multipart",
    "classify_part",
    "resolve_filename",
    "decode_encoded_words",
]
