import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, ROOT_DIR)

from attachment_extractor.core.header_parser import decode_text, parse_headers


def test_simple_block_and_body_offset():
    data = b"Subject: Hi\r\nContent-Type: text/plain\r\n\r\nbody"
    block = parse_headers(data)
    assert block.headers == {"subject": "Hi", "content-type": "text/plain"}
    assert data[block.body_start:] == b"body"


def test_names_are_lower_cased():
    block = parse_headers(b"CONTENT-DISPOSITION: attachment\n\n")
    assert block.headers == {"content-disposition": "attachment"}


def test_folded_header_equals_unfolded():
    folded = parse_headers(b'Content-Type: multipart/mixed;\r\n\tboundary="abc"\r\n\r\n')
    unfolded = parse_headers(b'Content-Type: multipart/mixed; boundary="abc"\r\n\r\n')
    assert folded.headers == unfolded.headers
    assert folded.headers["content-type"] == 'multipart/mixed; boundary="abc"'


def test_multiple_continuation_lines():
    data = b"Content-Disposition: attachment;\n   filename=\"a.pdf\";\n   size=10\n\n"
    block = parse_headers(data)
    assert block.headers["content-disposition"] == 'attachment; filename="a.pdf"; size=10'


def test_repeated_header_keeps_last_value():
    block = parse_headers(b"X-Tag: one\nX-Tag: two\n\n")
    assert block.headers["x-tag"] == "two"


def test_unterminated_block_has_no_body():
    block = parse_headers(b"Subject: Hi\r\nFrom: a@example.com")
    assert block.headers == {"subject": "Hi", "from": "a@example.com"}
    assert block.body_start is None


def test_line_without_colon_is_ignored():
    data = b"Subject: a\r\ngarbage line\r\nX-Other: y\r\n\r\n"
    block = parse_headers(data)
    assert block.headers == {"subject": "a", "x-other": "y"}


def test_continuation_after_stray_line_extends_open_header():
    data = b"Subject: first\r\ngarbage line\r\n second\r\nX-Other: y\r\n\r\n"
    block = parse_headers(data)
    assert block.headers == {"subject": "first second", "x-other": "y"}


def test_whitespace_only_line_ends_block():
    data = b"Subject: a\r\n \t\r\nbody"
    block = parse_headers(data)
    assert block.headers == {"subject": "a"}
    assert data[block.body_start:] == b"body"


def test_leading_blank_line_means_no_headers():
    block = parse_headers(b"\r\nbody")
    assert block.headers == {}
    assert block.body_start == 2


def test_range_offsets_are_absolute():
    data = b"XXXXContent-Type: application/pdf\n\nPAYLOAD--tail"
    end = data.index(b"--tail")
    block = parse_headers(data, 4, end)
    assert block.headers == {"content-type": "application/pdf"}
    assert data[block.body_start:end] == b"PAYLOAD"


def test_latin1_header_bytes():
    block = parse_headers(b"Subject: caf\xe9\n\n")
    assert block.headers["subject"] == "café"


def test_decode_text_prefers_utf8():
    assert decode_text("März".encode("utf-8")) == "März"
    assert decode_text(b"M\xe4rz") == "März"
