import json
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, ROOT_DIR)

import pytest

from attachment_extractor.cli import main, read_message, safe_filename
from attachment_extractor.exceptions import FileProcessingError
from samples import attachment_part, message, text_part


@pytest.fixture
def eml_file(tmp_path, pdf_bytes):
    path = tmp_path / "invoice_mail.eml"
    path.write_bytes(message("outer-XYZ", [text_part(), attachment_part(pdf_bytes, "invoice.pdf")]))
    return path


def test_safe_filename():
    assert safe_filename("report.pdf", 1) == "01_report.pdf"
    assert "/" not in safe_filename("../../etc/passwd", 2)
    assert safe_filename("", 3) == "03_attachment.bin"


def test_read_message_missing_file(tmp_path):
    with pytest.raises(FileProcessingError) as excinfo:
        read_message(str(tmp_path / "missing.eml"))
    assert excinfo.value.details["reason"] == "file not found"


def test_writes_attachments_and_report(tmp_path, eml_file, pdf_bytes, capsys):
    out_dir = tmp_path / "out"
    report_path = tmp_path / "report.json"

    exit_code = main([str(eml_file), "-o", str(out_dir), "-j", str(report_path)])

    assert exit_code == 0
    written = out_dir / "invoice_mail" / "01_invoice.pdf"
    assert written.read_bytes() == pdf_bytes

    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["total_files"] == 1
    assert report["successful"] == 1
    entry = report["results"][0]
    assert entry["total_attachments"] == 1
    assert entry["attachments"][0]["filename"] == "invoice.pdf"
    assert entry["written"] == [str(written)]

    assert "invoice.pdf" in capsys.readouterr().out


def test_include_content(tmp_path, eml_file):
    report_path = tmp_path / "report.json"
    main([str(eml_file), "-j", str(report_path), "--include-content", "--compact"])
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert "content_base64" in report["results"][0]["attachments"][0]


def test_missing_file_is_reported(tmp_path, eml_file):
    report_path = tmp_path / "report.json"
    exit_code = main([str(eml_file), str(tmp_path / "nope.eml"), "-j", str(report_path)])
    assert exit_code == 1
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["successful"] == 1
    assert "error" in report["results"][1]


def test_invalid_max_depth(eml_file, capsys):
    assert main([str(eml_file), "--max-depth", "0"]) == 2
    assert "max_nested_depth" in capsys.readouterr().err
