import base64
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, ROOT_DIR)

from attachment_extractor.config_manager import get_default_config
from attachment_extractor.core.context import ExtractionContext
from attachment_extractor.core.part_decoder import (
    classify_part,
    decode_base64_body,
    is_attachment,
    primary_mime_type,
    skip_delimiter_line_break,
)
from attachment_extractor.data_models import MessagePart, OutcomeKind, SkipReason
from samples import attachment_part, part


def make_context(segment: str, sink) -> ExtractionContext:
    return ExtractionContext(data=segment.encode("utf-8"), config=get_default_config(), sink=sink)


def classify(segment: str, sink):
    ctx = make_context(segment, sink)
    return classify_part(ctx, 0, len(ctx.data), 0)


def test_primary_mime_type():
    assert primary_mime_type("Application/PDF; name=x.pdf") == "application/pdf"
    assert primary_mime_type("garbage") == "application/octet-stream"
    assert primary_mime_type("") == "application/octet-stream"
    assert primary_mime_type("", "") == ""


def test_is_attachment_rules():
    def mp(**headers):
        return MessagePart({k.replace("_", "-"): v for k, v in headers.items()}, 0, 0)

    assert is_attachment(mp(content_disposition='attachment; filename="a.txt"', content_type="text/plain"))
    assert is_attachment(mp(content_type="application/pdf", content_disposition="inline"))
    assert is_attachment(mp(content_type="image/png", content_disposition="attachment"))
    assert not is_attachment(mp(content_type="image/png", content_disposition="inline"))
    assert not is_attachment(mp(content_type="text/plain; charset=utf-8"))
    assert not is_attachment(mp())


def test_skip_delimiter_line_break():
    assert skip_delimiter_line_break(b"  \r\nX", 0, 5) == 4
    assert skip_delimiter_line_break(b"\nX", 0, 2) == 1
    assert skip_delimiter_line_break(b"\rX", 0, 2) == 1
    assert skip_delimiter_line_break(b"X", 0, 1) == 0
    assert skip_delimiter_line_break(b"\r\n\r\nX", 0, 5) == 2


def test_decode_base64_body_ignores_blank_and_delimiter_lines():
    payload = b"hello attachment world"
    encoded = base64.encodebytes(payload).replace(b"\n", b"\r\n")
    body = b"\r\n" + encoded + b"\r\n\r\n--stray\r\n"
    assert decode_base64_body(body, 0, len(body)) == payload


def test_decode_base64_body_failure_returns_none():
    assert decode_base64_body(b"A\r\n", 0, 3) is None


def test_classify_attachment(sink):
    outcome = classify("\r\n" + attachment_part(b"%PDF-1.4 data", "a.pdf"), sink)
    assert outcome.kind is OutcomeKind.ATTACHMENT
    assert outcome.attachment.filename == "a.pdf"
    assert outcome.attachment.mime_type == "application/pdf"
    assert outcome.attachment.data == b"%PDF-1.4 data"


def test_classify_without_headers(sink):
    outcome = classify("\r\n\r\njust some preamble text\r\n", sink)
    assert outcome.kind is OutcomeKind.SKIPPED
    assert outcome.reason is SkipReason.NO_HEADERS


def test_classify_inline_text(sink):
    outcome = classify("\r\n" + part(["Content-Type: text/plain"], "hello\r\n"), sink)
    assert outcome.reason is SkipReason.NOT_ATTACHMENT


def test_classify_nested_multipart(sink):
    segment = "\r\n" + part(['Content-Type: multipart/alternative; boundary="inner"'], "--inner\r\n")
    outcome = classify(segment, sink)
    assert outcome.kind is OutcomeKind.NESTED
    assert outcome.boundary == "inner"
    assert outcome.part.content_type.startswith("multipart/alternative")


def test_classify_multipart_without_boundary(sink):
    outcome = classify("\r\n" + part(["Content-Type: multipart/mixed"], "x\r\n"), sink)
    assert outcome.reason is SkipReason.NO_BOUNDARY


def test_classify_non_base64_attachment(sink):
    segment = "\r\n" + part(
        ["Content-Type: application/pdf",
         'Content-Disposition: attachment; filename="a.pdf"',
         "Content-Transfer-Encoding: quoted-printable"],
        "not base64\r\n",
    )
    outcome = classify(segment, sink)
    assert outcome.reason is SkipReason.UNSUPPORTED_ENCODING
    assert outcome.detail == "a.pdf (quoted-printable)"


def test_classify_empty_payload(sink):
    segment = "\r\n" + part(
        ["Content-Type: application/pdf", "Content-Transfer-Encoding: base64"], "\r\n"
    )
    assert classify(segment, sink).reason is SkipReason.EMPTY_PAYLOAD


def test_classify_bad_base64(sink):
    segment = "\r\n" + part(
        ["Content-Type: application/pdf", "Content-Transfer-Encoding: base64"], "A\r\n"
    )
    assert classify(segment, sink).reason is SkipReason.BASE64_DECODE_FAILED


def test_classify_default_filename_and_content_id(sink):
    segment = "\r\n" + part(
        ["Content-Type: application/octet-stream",
         "Content-Transfer-Encoding: base64",
         "Content-ID: <blob@example.com>"],
        base64.b64encode(b"blob").decode("ascii") + "\r\n",
    )
    attachment = classify(segment, sink).attachment
    assert attachment.filename == "attachment.bin"
    assert attachment.content_id == "<blob@example.com>"
