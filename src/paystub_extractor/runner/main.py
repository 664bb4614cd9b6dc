"""
Main CLI entry point.
"""

import argparse
import dataclasses
import json
import logging
import mimetypes
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import ConfigValidationError, ExtractionConfig, create_default_config, load_config
from ..errors import ExtractionError, OCRInitializationError
from ..schemas.paystub import ExtractedField, Money, PaystubRecord
from ..service import ExtractionService

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("json", "pretty", "summary")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="paystub-extractor",
        description="Extract structured pay statement data from PDFs and images",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # extract command
    extract_parser = subparsers.add_parser("extract", help="Extract paystub data from files")
    extract_parser.add_argument(
        "files",
        type=Path,
        nargs="+",
        metavar="FILE",
        help="PDF or image files to extract",
    )
    extract_parser.add_argument(
        "--content-type",
        type=str,
        default=None,
        help="MIME type for all files (default: guessed from extension)",
    )
    extract_parser.add_argument(
        "--output",
        choices=OUTPUT_FORMATS,
        default="pretty",
        help="Output format (default: pretty)",
    )
    extract_parser.add_argument(
        "--no-ocr",
        action="store_true",
        help="Disable OCR (text-layer PDFs only)",
    )
    extract_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Disable the result cache",
    )
    extract_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-file OCR deadline in seconds (default: from config)",
    )
    extract_parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of files to process concurrently (default: 1)",
    )

    # check command
    subparsers.add_parser("check", help="Show service capabilities")

    # init-config command
    init_parser = subparsers.add_parser("init-config", help="Write a default config file")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file",
    )

    return parser


@dataclass
class FileOutcome:
    """Result of extracting one file."""

    path: Path
    record: Optional[PaystubRecord] = None
    error: Optional[str] = None


def guess_content_type(path: Path) -> Optional[str]:
    content_type, _ = mimetypes.guess_type(str(path))
    return content_type


def extract_file(
    service: ExtractionService,
    path: Path,
    content_type: Optional[str] = None,
    timeout: Optional[float] = None,
) -> FileOutcome:
    """
    Read and extract one file, enforcing the intake size limit.

    Never raises for per-file problems; they are reported in the outcome.
    """
    content_type = content_type or guess_content_type(path)
    if not content_type:
        return FileOutcome(path=path, error="Cannot determine content type")

    try:
        size = path.stat().st_size
        if size > service.config.max_file_size_bytes:
            return FileOutcome(
                path=path,
                error=(
                    f"File too large ({size} bytes, "
                    f"limit {service.config.max_file_size_bytes})"
                ),
            )
        data = path.read_bytes()
    except OSError as e:
        return FileOutcome(path=path, error=f"Cannot read file: {e}")

    try:
        record = service.extract(data, content_type, timeout=timeout)
    except ExtractionError as e:
        logger.error("Extraction failed for %s: %s", path, e)
        return FileOutcome(path=path, error=str(e))

    return FileOutcome(path=path, record=record)


def _money(value: Optional[Money]) -> str:
    if value is None:
        return "-"
    return f"{value.amount} {value.currency}"


def _field(extracted: Optional[ExtractedField]) -> str:
    if extracted is None:
        return "-"
    return f"{_money(extracted.value)}  (confidence {extracted.confidence:.2f})"


def format_pretty(outcome: FileOutcome, service: ExtractionService) -> str:
    """Human-readable multi-line report."""
    if outcome.record is None:
        return f"\n❌ {outcome.path}: {outcome.error}\n"

    record = outcome.record
    lines = [
        f"\n📄 {outcome.path}",
        "=" * 40,
        f"  Provider:          {record.provider}",
        f"  Employer:          {record.employer_name or '-'}",
        f"  Employee:          {record.employee_name or '-'}",
        f"  Employee ID:       {record.employee_id or '-'}",
        f"  Pay period:        {record.pay_period_start or '-'} to {record.pay_period_end or '-'}",
        f"  Pay date:          {record.pay_date or '-'}",
        f"  Frequency:         {record.pay_frequency.value}",
        f"  Gross pay:         {_field(record.gross_pay)}",
        f"  Net pay:           {_field(record.net_pay)}",
        f"  YTD gross:         {_money(record.ytd_gross_pay)}",
        f"  YTD net:           {_money(record.ytd_net_pay)}",
    ]

    if record.earnings:
        lines.append("  Earnings:")
        for earning in record.earnings:
            hours = f"  {earning.hours} h" if earning.hours is not None else ""
            lines.append(f"    - {earning.description:<24} {_money(earning.amount):>16}{hours}")

    if record.deductions:
        lines.append("  Deductions:")
        for deduction in record.deductions:
            lines.append(
                f"    - {deduction.name:<24} {_money(deduction.amount):>16}  "
                f"[{deduction.category.value}]"
            )

    review_state = service.scorer.review_state(record)
    lines.append(
        f"  Confidence:        {record.overall_confidence:.2f} ({review_state.value})"
    )
    lines.append(f"  Acquired via:      {record.acquisition_strategy}")
    lines.append("")
    return "\n".join(lines)


def format_summary(outcome: FileOutcome) -> str:
    """One line per file."""
    if outcome.record is None:
        return f"{outcome.path}: ERROR {outcome.error}"

    record = outcome.record
    gross = _money(record.gross_pay.value) if record.gross_pay else "-"
    net = _money(record.net_pay.value) if record.net_pay else "-"
    return (
        f"{outcome.path}: provider={record.provider} gross={gross} net={net} "
        f"period={record.pay_period_start or '-'}..{record.pay_period_end or '-'} "
        f"confidence={record.overall_confidence:.2f}"
    )


def format_json(outcome: FileOutcome) -> str:
    if outcome.record is None:
        return json.dumps({"file": str(outcome.path), "error": outcome.error}, indent=2)
    return outcome.record.to_json(indent=2)


def cmd_extract(
    config: ExtractionConfig,
    files: list[Path],
    content_type: Optional[str] = None,
    output: str = "pretty",
    timeout: Optional[float] = None,
    workers: int = 1,
) -> int:
    """Extract paystub records from local files."""
    try:
        service = ExtractionService(config)
    except OCRInitializationError as e:
        print(f"❌ {e}")
        return 1

    outcomes: dict[Path, FileOutcome] = {}
    with service:
        if workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(extract_file, service, path, content_type, timeout): path
                    for path in files
                }
                for future in as_completed(futures):
                    path = futures[future]
                    try:
                        outcomes[path] = future.result()
                    except Exception as e:
                        logger.exception("Unexpected failure for %s", path)
                        outcomes[path] = FileOutcome(path=path, error=str(e))
        else:
            for path in files:
                outcomes[path] = extract_file(service, path, content_type, timeout)

        # Report in the order the files were given
        for path in files:
            outcome = outcomes[path]
            if output == "json":
                print(format_json(outcome))
            elif output == "summary":
                print(format_summary(outcome))
            else:
                print(format_pretty(outcome, service))

    failed = sum(1 for outcome in outcomes.values() if outcome.record is None)
    if failed:
        logger.error("%d of %d files failed", failed, len(files))
        return 1
    return 0


def cmd_check(config: ExtractionConfig) -> int:
    """Show service capabilities."""
    try:
        service = ExtractionService(config)
    except OCRInitializationError as e:
        print(f"❌ OCR enabled but unavailable: {e}")
        return 1

    with service:
        capabilities = service.capabilities()

    print("\n🔎 Paystub Extractor")
    print("=" * 40)
    print(f"  PDF text extraction:    {'yes' if capabilities['pdf_extraction'] else 'no'}")
    if capabilities["ocr"]:
        version = getattr(service.ocr_backend, "version", "")
        print(f"  OCR:                    {capabilities['ocr_backend']} {version}".rstrip())
    else:
        print("  OCR:                    disabled")
    print(f"  Result cache:           {'enabled' if capabilities['cache'] else 'disabled'}")
    print(f"  Max file size:          {config.max_file_size_bytes} bytes")
    print(f"  Processing timeout:     {config.processing_timeout_seconds}s")
    print()

    return 0


def cmd_init_config(config_path: Path, force: bool = False) -> int:
    """Write a default configuration file."""
    if config_path.exists() and not force:
        print(f"❌ {config_path} already exists (use --force to overwrite)")
        return 1

    create_default_config(config_path)
    print(f"✅ Wrote default configuration to {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config, parsed.force)

    # Load config
    try:
        config = load_config(parsed.config)
    except ConfigValidationError as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    # Route to command
    if parsed.command == "extract":
        if parsed.no_ocr:
            config = dataclasses.replace(config, enable_ocr=False)
        if parsed.no_cache:
            config = dataclasses.replace(config, cache_enabled=False)
        return cmd_extract(
            config,
            parsed.files,
            content_type=parsed.content_type,
            output=parsed.output,
            timeout=parsed.timeout,
            workers=max(1, parsed.workers),
        )
    elif parsed.command == "check":
        return cmd_check(config)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
