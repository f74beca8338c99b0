import os
import sys

import pytest

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, ROOT_DIR)

from attachment_extractor.processing import is_dangerous_mismatch, sniff_content_type


@pytest.mark.parametrize("data,expected", [
    (b"\xFF\xD8\xFF\xE0rest", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF89a", "image/gif"),
    (b"%PDF-1.7", "application/pdf"),
    (b"PK\x03\x04data", "application/zip"),
    (b"PK\x05\x06data", "application/zip"),
    (b"Rar!\x1a\x07", "application/x-rar-compressed"),
    (b"MZ\x90\x00", "application/x-msdownload"),
    (b"plain text", "application/octet-stream"),
    (b"MZ", "application/octet-stream"),
])
def test_sniff_content_type(data, expected):
    assert sniff_content_type(data) == expected


def test_dangerous_mismatch():
    assert is_dangerous_mismatch("application/pdf", "application/x-msdownload")
    assert not is_dangerous_mismatch("application/x-msdownload", "application/x-msdownload")
    assert not is_dangerous_mismatch("image/png", "image/jpeg")
