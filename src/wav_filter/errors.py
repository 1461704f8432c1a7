from __future__ import annotations

from pathlib import Path


class WavFilterError(Exception):
    """Base class for every error raised by wav_filter."""


class TraversalError(WavFilterError):
    """The input root is missing or is not a directory."""


class OrchestrationError(WavFilterError):
    """The run cannot start, e.g. the output root cannot be created."""


class DurationError(WavFilterError):
    kind = "unknown"

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class UnreadableWavError(DurationError):
    kind = "unreadable"


class MalformedWavError(DurationError):
    kind = "malformed"


class CopyError(WavFilterError):
    def __init__(self, source: Path, destination: Path, reason: str) -> None:
        super().__init__(f"{source} -> {destination}: {reason}")
        self.source = source
        self.destination = destination
        self.reason = reason
