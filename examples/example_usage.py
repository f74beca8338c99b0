#!/usr/bin/env python3
"""
Example usage of the MIME attachment extractor.

This script demonstrates how to use the extractor for different scenarios.
"""

import json
import logging
import sys
from pathlib import Path

from attachment_extractor import (
    AttachmentExtractor,
    CollectingDiagnosticSink,
    DiagnosticKind,
    extract,
    get_config_from_env,
)

# Configure detailed logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def list_attachments(email_path: str):
    """Print every attachment of a single email file."""
    print(f"Extracting from: {email_path}")

    attachments = extract(Path(email_path).read_bytes())
    if not attachments:
        print("  (no attachments)")
    for att in attachments:
        print(f"  - {att.filename} ({att.mime_type}, {att.size} bytes)")
        if att.content_id:
            print(f"    Content-ID: {att.content_id}")


def analyze_email_file(email_path: str, output_path: str = None):
    """Extract with a report and collected diagnostics, optionally saving JSON."""
    sink = CollectingDiagnosticSink()
    extractor = AttachmentExtractor(get_config_from_env(), diagnostics=sink)

    result = extractor.extract_with_report(Path(email_path).read_bytes())
    report = result.report

    print("\n=== EXTRACTION SUMMARY ===")
    print(f"Attachments: {len(result.attachments)}")
    print(f"Parts seen: {report.parts_seen}")
    print(f"Deepest multipart level: {report.max_depth_seen}")
    print(f"Skipped parts: {report.skipped or 'none'}")

    for check in report.pdf_checks:
        status = "ok" if check.looks_intact else "⚠️  damaged"
        print(f"PDF {check.filename}: {status}")

    for name in report.content_type_mismatches:
        print(f"⚠️  {name}: executable content under a non-executable type")

    warnings = [e for e in sink.events if e.level >= logging.WARNING]
    if warnings:
        print("\n=== WARNINGS ===")
        for event in warnings:
            print(f"[{event.kind.value}] {event.message}")

    print(f"\nSummary events: {len(sink.of_kind(DiagnosticKind.SUMMARY))}")

    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        print(f"Report saved to: {output_path}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python example_usage.py <email.eml> [report.json]")
        sys.exit(1)

    list_attachments(sys.argv[1])
    analyze_email_file(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None)
