from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


STATUS_COPIED = "copied"
STATUS_WOULD_COPY = "would-copy"
STATUS_OUT_OF_RANGE = "out-of-range"
STATUS_DURATION_ERROR = "duration-error"
STATUS_COPY_ERROR = "copy-error"


@dataclass(frozen=True)
class WavHeader:
    audio_format: int
    channels: int
    sample_rate: int
    block_align: int
    bits_per_sample: int
    data_size: int

    @property
    def frame_count(self) -> int:
        return self.data_size // self.block_align

    @property
    def duration_ms(self) -> int:
        return self.frame_count * 1000 // self.sample_rate


@dataclass(frozen=True)
class FilterBounds:
    min_ms: int = 0
    max_ms: Optional[int] = None

    def admits(self, duration_ms: int) -> bool:
        # Inverted bounds admit nothing.
        if duration_ms < self.min_ms:
            return False
        return self.max_ms is None or duration_ms <= self.max_ms

    def describe(self) -> str:
        upper = "unbounded" if self.max_ms is None else f"{self.max_ms} ms"
        return f"{self.min_ms} ms .. {upper}"


@dataclass(frozen=True)
class FileCandidate:
    absolute_path: Path
    relative_path: Path


@dataclass
class FileOutcome:
    candidate: FileCandidate
    status: str
    header: Optional[WavHeader] = None
    destination: Optional[Path] = None
    error: Optional[str] = None

    @property
    def duration_ms(self) -> Optional[int]:
        return self.header.duration_ms if self.header is not None else None


@dataclass
class RunReport:
    seen: int = 0
    copied: int = 0
    would_copy: int = 0
    out_of_range: int = 0
    failed: int = 0
    bytes_copied: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def copied_count(self) -> int:
        return self.copied

    def record(self, outcome: FileOutcome, size_bytes: int = 0) -> None:
        self.seen += 1
        if outcome.status == STATUS_COPIED:
            self.copied += 1
            self.bytes_copied += size_bytes
        elif outcome.status == STATUS_WOULD_COPY:
            self.would_copy += 1
        elif outcome.status == STATUS_OUT_OF_RANGE:
            self.out_of_range += 1
        else:
            self.failed += 1
            self.warnings.append(f"{outcome.status}: {outcome.candidate.relative_path}: {outcome.error}")
