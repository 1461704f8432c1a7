from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable, Optional

from .duration import probe_wav
from .errors import CopyError, DurationError, OrchestrationError
from .models import (
    STATUS_COPIED,
    STATUS_COPY_ERROR,
    STATUS_DURATION_ERROR,
    STATUS_OUT_OF_RANGE,
    STATUS_WOULD_COPY,
    FileCandidate,
    FileOutcome,
    FilterBounds,
    RunReport,
)
from .scanner import iter_wav_files

logger = logging.getLogger(__name__)


def target_path_for(candidate: FileCandidate, output_root: Path) -> Path:
    return output_root / candidate.relative_path


def copy_candidate(candidate: FileCandidate, output_root: Path) -> Path:
    """Copy one file under ``output_root``, creating parents and overwriting."""
    target = target_path_for(candidate, output_root)
    if target.is_dir():
        raise CopyError(candidate.absolute_path, target, "Destination is a directory")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(candidate.absolute_path, target)
    except OSError as exc:
        raise CopyError(candidate.absolute_path, target, exc.strerror or str(exc)) from exc
    return target


def process_candidate(
    candidate: FileCandidate,
    output_root: Path,
    bounds: FilterBounds,
    dry_run: bool = False,
) -> FileOutcome:
    try:
        header = probe_wav(candidate.absolute_path)
    except DurationError as exc:
        logger.warning("duration %s: %s: %s", exc.kind, candidate.absolute_path, exc.reason)
        return FileOutcome(candidate=candidate, status=STATUS_DURATION_ERROR, error=f"{exc.kind}: {exc.reason}")

    duration_ms = header.duration_ms
    if not bounds.admits(duration_ms):
        logger.debug("[skip] %s (%d ms outside %s)", candidate.relative_path, duration_ms, bounds.describe())
        return FileOutcome(candidate=candidate, status=STATUS_OUT_OF_RANGE, header=header)

    if dry_run:
        target = target_path_for(candidate, output_root)
        logger.info("[dry-run] %s -> %s (%d ms)", candidate.absolute_path, target, duration_ms)
        return FileOutcome(candidate=candidate, status=STATUS_WOULD_COPY, header=header, destination=target)

    try:
        target = copy_candidate(candidate, output_root)
    except CopyError as exc:
        logger.warning("copy failed: %s", exc)
        return FileOutcome(candidate=candidate, status=STATUS_COPY_ERROR, header=header, error=exc.reason)

    logger.debug("[copy] %s -> %s (%d ms)", candidate.absolute_path, target, duration_ms)
    return FileOutcome(candidate=candidate, status=STATUS_COPIED, header=header, destination=target)


def _size_of(path: Optional[Path]) -> int:
    if path is None:
        return 0
    try:
        return path.stat().st_size
    except OSError:
        return 0


def filter_and_copy(
    input_root: Path,
    output_root: Path,
    bounds: FilterBounds,
    dry_run: bool = False,
    on_outcome: Callable[[FileOutcome], None] | None = None,
) -> RunReport:
    """Copy every WAV under ``input_root`` whose duration ``bounds`` admits.

    Fatal problems (bad input root, unusable output root) raise before any
    file is examined. Per-file failures are logged, recorded in the report
    and skipped.
    """
    input_root = input_root.absolute()
    output_root = output_root.absolute()
    report = RunReport()

    try:
        same_root = input_root.resolve() == output_root.resolve()
    except OSError:
        same_root = input_root == output_root

    nested = output_root != input_root and input_root in output_root.parents
    candidates = iter_wav_files(
        input_root,
        exclude=output_root if nested else None,
        warn=report.warnings.append,
    )

    if same_root:
        raise OrchestrationError(f"Output directory must differ from input directory: {output_root}")

    if not dry_run:
        try:
            output_root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OrchestrationError(
                f"Failed to create output directory: {output_root}: {exc.strerror or str(exc)}"
            ) from exc

    for candidate in candidates:
        outcome = process_candidate(candidate, output_root, bounds, dry_run=dry_run)
        report.record(outcome, size_bytes=_size_of(outcome.destination) if outcome.status == STATUS_COPIED else 0)
        if on_outcome:
            on_outcome(outcome)

    return report


def run(input_root: Path, output_root: Path, bounds: FilterBounds) -> int:
    return filter_and_copy(input_root, output_root, bounds).copied_count
