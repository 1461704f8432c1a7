from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Optional, Sequence

from .errors import OrchestrationError, TraversalError
from .exporters import ManifestWriter
from .metrics import human_size, summarize
from .models import FilterBounds
from .organizer import filter_and_copy
from .scanner import check_input_root

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"


def _milliseconds(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer number of milliseconds: {value!r}")
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {parsed}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wav-filter",
        description="Copy WAV files whose duration falls within a millisecond range.",
    )
    parser.add_argument(
        "-i",
        "--input",
        type=Path,
        required=True,
        help="Input directory containing WAV files (processed recursively)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Output directory for filtered WAV files (relative paths are preserved)",
    )
    parser.add_argument(
        "-m",
        "--min-length",
        type=_milliseconds,
        default=0,
        help="Minimum length in milliseconds, inclusive (default: 0)",
    )
    parser.add_argument(
        "-M",
        "--max-length",
        type=_milliseconds,
        default=None,
        help="Maximum length in milliseconds, inclusive (default: no limit)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report which files would be copied without writing anything",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="Write a CSV row per WAV file with its duration, format and outcome",
    )
    parser.add_argument(
        "--warnings-log",
        type=Path,
        default=None,
        help="Write per-file warnings to this file when any occur",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every per-file decision",
    )
    return parser


def configure_logging(verbose: bool) -> None:
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    logging.getLogger("mutagen").setLevel(logging.WARNING)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    input_root: Path = args.input.expanduser().resolve()
    output_root: Path = args.output.expanduser().resolve()
    bounds = FilterBounds(min_ms=args.min_length, max_ms=args.max_length)

    if bounds.max_ms is not None and bounds.max_ms < bounds.min_ms:
        logging.getLogger(__name__).warning(
            "maximum length %d ms is below minimum length %d ms; no file can match",
            bounds.max_ms,
            bounds.min_ms,
        )

    try:
        check_input_root(input_root)
    except TraversalError as exc:
        raise SystemExit(str(exc))

    print(f"[start] scanning: {input_root}")
    print(f"[start] duration window: {bounds.describe()}")
    if args.dry_run:
        print("[start] dry-run mode enabled (nothing will be written)")

    with ExitStack() as stack:
        manifest: Optional[ManifestWriter] = None
        if args.manifest is not None:
            manifest_path = args.manifest.expanduser().resolve()
            try:
                manifest = stack.enter_context(ManifestWriter(manifest_path))
            except OSError as exc:
                raise SystemExit(f"Failed to open manifest: {manifest_path}: {exc.strerror or str(exc)}")
        try:
            report = filter_and_copy(
                input_root,
                output_root,
                bounds,
                dry_run=args.dry_run,
                on_outcome=manifest,
            )
        except (TraversalError, OrchestrationError) as exc:
            raise SystemExit(str(exc))

    metrics = summarize(report)
    print(f"[done] wav files found: {metrics.wav_files_seen}")
    print(f"[done] outside duration window: {metrics.out_of_range}")
    print(f"[done] skipped due to errors: {metrics.failed}")
    if args.dry_run:
        print(f"[done] would copy: {metrics.would_copy}")
    else:
        print(f"[done] total size copied: {human_size(metrics.bytes_copied)}")
    if manifest is not None:
        print(f"[write] manifest: {args.manifest} ({manifest.rows} rows)")

    if report.warnings:
        print(f"[warn] warnings: {len(report.warnings)}")
        if args.warnings_log is not None:
            warnings_path = args.warnings_log.expanduser().resolve()
            try:
                warnings_path.parent.mkdir(parents=True, exist_ok=True)
                warnings_path.write_text("\n".join(report.warnings) + "\n", encoding="utf-8")
            except OSError as exc:
                print(f"[warn] could not write warnings log: {warnings_path}: {exc.strerror or str(exc)}")
            else:
                print(f"[warn] details written: {warnings_path}")

    print(f"Filtered and copied {report.copied_count} WAV files to {args.output}")


if __name__ == "__main__":
    main()
