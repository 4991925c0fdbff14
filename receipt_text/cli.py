"""Command-line interface for parsing receipt transcripts.

Provides subcommands to parse a single transcript to JSON, re-process a
folder of transcripts into a CSV, and benchmark the parser against
labelled ground truth.
"""

import argparse
import csv
import json
import sys
import time
from pathlib import Path

from receipt_text.benchmark.evaluator import Evaluator, load_ground_truth
from receipt_text.extraction.draft import build_draft, draft_from_result
from receipt_text.extraction.parser import ReceiptTextParser
from receipt_text.utils.config import AppConfig, load_config
from receipt_text.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.txt",)
_CSV_COLUMNS = [
    "filename",
    "status",
    "merchant_name",
    "date",
    "total_amount",
    "amount_value",
    "currency",
    "error",
]


def _find_transcripts(input_dir: Path) -> list[Path]:
    """Find all transcript files in a directory.

    Args:
        input_dir: Directory to scan.

    Returns:
        Sorted list of transcript paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def _read_transcript(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def process_folder(
    input_dir: Path,
    output_csv: Path,
    config: AppConfig | None = None,
    verbose: bool = False,
) -> dict[str, int]:
    """Parse every transcript in a folder and export results to CSV.

    Args:
        input_dir: Directory containing ``.txt`` transcripts.
        output_csv: Path for the output CSV file.
        config: Application configuration; loaded from disk when omitted.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    config = config or load_config()
    parser = ReceiptTextParser(config.parser)

    files = _find_transcripts(input_dir)
    if not files:
        logger.warning("No transcripts found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d transcripts to parse", len(files))

    results: list[dict[str, object]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Parsing [{i}/{len(files)}]: {file_path.name}")

        try:
            text = _read_transcript(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read %s: %s", file_path.name, exc)
            results.append(
                {"filename": file_path.name, "status": "failed", "error": str(exc)}
            )
            failed += 1
            continue

        results.append(_parse_row(file_path.name, text, parser, config))
        successful += 1

    _write_csv(results, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _print_summary(summary, output_csv)
    return summary


def _parse_row(
    filename: str, text: str, parser: ReceiptTextParser, config: AppConfig
) -> dict[str, object]:
    """Parse one transcript into a CSV row."""
    result, total = parser.parse_with_total(text)
    draft = draft_from_result(text, result, total, defaults=config.draft)
    return {
        "filename": filename,
        "status": "success",
        "merchant_name": result.merchant_name,
        "date": result.date,
        "total_amount": result.total_amount,
        "amount_value": result.amount_value,
        "currency": draft.currency,
        "error": None,
    }


def _write_csv(results: list[dict[str, object]], output_path: Path) -> None:
    """Write parse results to a CSV file.

    Args:
        results: List of result rows.
        output_path: Path for the output CSV file.
    """
    if not results:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(results)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Parsing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def parse_single(
    text: str,
    config: AppConfig | None = None,
    as_draft: bool = False,
    category: str | None = None,
) -> dict[str, object]:
    """Parse one transcript and return a JSON-serializable dict.

    Args:
        text: Transcript contents.
        config: Application configuration; loaded from disk when omitted.
        as_draft: Return the full receipt draft instead of the three fields.
        category: Category name for the draft.

    Returns:
        The parsed fields, or the draft when ``as_draft`` is set.
    """
    config = config or load_config()
    parser = ReceiptTextParser(config.parser)

    if as_draft:
        draft = build_draft(
            text, parser=parser, category=category, defaults=config.draft
        )
        return draft.model_dump(mode="json")

    result = parser.parse(text)
    return {**result.to_dict(), "amount_value": result.amount_value}


def run_benchmark(
    input_dir: Path,
    ground_truth_path: Path,
    config: AppConfig | None = None,
    report_path: Path | None = None,
) -> str:
    """Parse a folder of transcripts and score the results.

    Args:
        input_dir: Directory containing ``.txt`` transcripts.
        ground_truth_path: JSON or CSV ground truth keyed by file name.
        config: Application configuration; loaded from disk when omitted.
        report_path: Optional file to write the report to.

    Returns:
        The formatted benchmark report.
    """
    config = config or load_config()
    parser = ReceiptTextParser(config.parser)
    ground_truth = load_ground_truth(ground_truth_path)

    predictions: dict[str, dict[str, str | None]] = {}
    elapsed_ms: list[float] = []
    for file_path in _find_transcripts(input_dir):
        try:
            text = _read_transcript(file_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to read %s: %s", file_path.name, exc)
            continue
        start = time.perf_counter()
        predictions[file_path.name] = parser.parse(text).to_dict()
        elapsed_ms.append((time.perf_counter() - start) * 1000)

    evaluator = Evaluator()
    avg_ms = sum(elapsed_ms) / len(elapsed_ms) if elapsed_ms else 0.0
    result = evaluator.evaluate(predictions, ground_truth, avg_ms)
    return evaluator.generate_report(result, report_path)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Receipt OCR transcript parser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None, help="YAML configuration file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse a single transcript")
    parse_parser.add_argument(
        "file", type=Path, help="Transcript file to parse ('-' reads stdin)"
    )
    parse_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")
    parse_parser.add_argument(
        "--draft", action="store_true", help="Emit a full receipt draft"
    )
    parse_parser.add_argument("--category", help="Category name for the draft")

    batch_parser = subparsers.add_parser("batch", help="Parse a folder of transcripts")
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with .txt transcripts"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    bench_parser = subparsers.add_parser(
        "benchmark", help="Score the parser against ground truth"
    )
    bench_parser.add_argument(
        "input_dir", type=Path, help="Input directory with .txt transcripts"
    )
    bench_parser.add_argument(
        "ground_truth", type=Path, help="Ground truth JSON or CSV file"
    )
    bench_parser.add_argument("-o", "--output", type=Path, help="Report output file")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command == "parse":
        if str(args.file) == "-":
            text = sys.stdin.read()
        elif not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        else:
            text = _read_transcript(args.file)
        result = parse_single(text, config, args.draft, args.category)
        output_str = json.dumps(result, indent=2, ensure_ascii=False)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str, encoding="utf-8")
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    elif args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, config, args.verbose)
    elif args.command == "benchmark":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        if not args.ground_truth.exists():
            print(f"Error: {args.ground_truth} does not exist", file=sys.stderr)
            sys.exit(1)
        print(run_benchmark(args.input_dir, args.ground_truth, config, args.output))
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
