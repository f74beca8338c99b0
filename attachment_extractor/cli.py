#!/usr/bin/env python3
import argparse
import dataclasses
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config_manager import ExtractorConfiguration, get_config_from_env
from .data_models import ExtractedAttachment
from .exceptions import AttachmentExtractorError, raise_message_unreadable, wrap_processing_error
from .extractor import AttachmentExtractor

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f\x7f/\\:*?"<>|]')


def safe_filename(filename: str, index: int) -> str:
    """Sanitize an attachment filename for writing to disk, prefixed with its index."""
    name = UNSAFE_FILENAME_CHARS.sub("_", filename).strip(" .")
    return f"{index:02d}_{name or 'attachment.bin'}"


def read_message(path: str) -> bytes:
    file_path = Path(path)
    if not file_path.is_file():
        raise_message_unreadable(path, "file not found")
    try:
        return file_path.read_bytes()
    except OSError as e:
        raise wrap_processing_error(e, "read_message", {"file_path": path})


def write_attachments(attachments: List[ExtractedAttachment], output_dir: Path) -> List[str]:
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for index, attachment in enumerate(attachments, start=1):
        target = output_dir / safe_filename(attachment.filename, index)
        try:
            target.write_bytes(attachment.data)
            written.append(str(target))
        except OSError as e:
            logger.error(f"Error saving attachment {attachment.filename}: {e}")
    return written


def build_config(args: argparse.Namespace) -> ExtractorConfiguration:
    config = get_config_from_env()
    if args.max_depth is not None:
        config = dataclasses.replace(
            config, security=dataclasses.replace(config.security, max_nested_depth=args.max_depth)
        )
    if args.dedupe:
        config = dataclasses.replace(
            config, processing=dataclasses.replace(config.processing, enable_deduplication=True)
        )
    config.validate()
    return config


def process_file(extractor: AttachmentExtractor, path: str, output_dir: Optional[str],
                 include_content: bool) -> Dict[str, Any]:
    raw = read_message(path)
    result = extractor.extract_with_report(raw)

    summary = {"source": path, "size": len(raw), **result.to_dict(include_content)}
    if output_dir:
        summary["written"] = write_attachments(result.attachments, Path(output_dir) / Path(path).stem)
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Extract attachments from raw RFC 5322 email files')
    parser.add_argument('files', nargs='+', help='Email files (.eml) to process')
    parser.add_argument('-o', '--output-dir', help='Write decoded attachments below this directory')
    parser.add_argument('-j', '--json', dest='json_output', help='Write the JSON report to this file')
    parser.add_argument('--compact', action='store_true', help='Compact JSON output')
    parser.add_argument('--max-depth', type=int, default=None,
                        help='Maximum multipart nesting depth (default: 20 or EXTRACTOR_MAX_NESTED_DEPTH)')
    parser.add_argument('--include-content', action='store_true',
                        help='Include base64 attachment content in the JSON report')
    parser.add_argument('--dedupe', action='store_true', help='Drop attachments with identical content')
    parser.add_argument('--log-file', help='Write debug log to specified file')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        filename=args.log_file,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        extractor = AttachmentExtractor(build_config(args))
    except AttachmentExtractorError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 2

    results = []
    for file_path in args.files:
        try:
            result = process_file(extractor, file_path, args.output_dir, args.include_content)
            results.append(result)
            print(f"\n📧 {file_path}: {result['total_attachments']} attachments")
            for item in result['attachments']:
                print(f"  📎 {item['filename']} ({item['mime_type']}, {item['size']:,} bytes)")
            skipped = result['report']['skipped']
            if skipped:
                print(f"  ⏭  skipped: {', '.join(f'{k}={v}' for k, v in sorted(skipped.items()))}")
        except AttachmentExtractorError as e:
            print(f"✗ Error processing {file_path}: {e}", file=sys.stderr)
            logger.error(f"Error processing {file_path}: {e}")
            results.append({'source': file_path, 'error': str(e)})

    output = {
        'results': results,
        'total_files': len(results),
        'successful': len([r for r in results if 'error' not in r]),
    }

    if args.json_output:
        with open(args.json_output, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=None if args.compact else 2, ensure_ascii=False)
        print(f"\n💾 Report saved to: {args.json_output}")

    return 0 if output['successful'] == output['total_files'] else 1


if __name__ == "__main__":
    sys.exit(main())
