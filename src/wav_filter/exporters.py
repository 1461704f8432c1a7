from __future__ import annotations

import csv
from pathlib import Path
from typing import IO

from .metadata import read_wav_tags
from .metrics import bytes_to_mb
from .models import FileOutcome


MANIFEST_COLUMNS = [
    "source_path",
    "relative_path",
    "status",
    "duration_ms",
    "sample_rate_hz",
    "channels",
    "bits_per_sample",
    "size_mb",
    "title",
    "artist",
    "detail",
]


def manifest_row(outcome: FileOutcome) -> dict[str, object]:
    header = outcome.header
    source = outcome.candidate.absolute_path
    try:
        size_mb: object = round(bytes_to_mb(source.stat().st_size), 2)
    except OSError:
        size_mb = ""
    tags = read_wav_tags(source) if header is not None else {"title": "", "artist": ""}
    return {
        "source_path": str(source),
        "relative_path": outcome.candidate.relative_path.as_posix(),
        "status": outcome.status,
        "duration_ms": outcome.duration_ms if outcome.duration_ms is not None else "",
        "sample_rate_hz": header.sample_rate if header else "",
        "channels": header.channels if header else "",
        "bits_per_sample": header.bits_per_sample if header else "",
        "size_mb": size_mb,
        "title": tags["title"],
        "artist": tags["artist"],
        "detail": outcome.error or "",
    }


class ManifestWriter:
    """Streams one CSV row per processed WAV file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._handle: IO[str] | None = None
        self._writer: csv.DictWriter | None = None
        self.rows = 0

    def __enter__(self) -> "ManifestWriter":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("w", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(self._handle, fieldnames=MANIFEST_COLUMNS)
        self._writer.writeheader()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._writer = None

    def __call__(self, outcome: FileOutcome) -> None:
        if self._writer is None:
            raise RuntimeError("ManifestWriter used outside of a with-block")
        self._writer.writerow(manifest_row(outcome))
        self.rows += 1

