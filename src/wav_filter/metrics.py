from __future__ import annotations

from dataclasses import dataclass

from .models import RunReport


@dataclass
class RunMetrics:
    wav_files_seen: int
    would_copy: int
    out_of_range: int
    failed: int
    bytes_copied: int


def summarize(report: RunReport) -> RunMetrics:
    return RunMetrics(
        wav_files_seen=report.seen,
        would_copy=report.would_copy,
        out_of_range=report.out_of_range,
        failed=report.failed,
        bytes_copied=report.bytes_copied,
    )


def human_size(num_bytes: int) -> str:
    return f"{bytes_to_mb(num_bytes):.2f} MB"


def bytes_to_mb(num_bytes: int) -> float:
    return num_bytes / (1024 * 1024)
