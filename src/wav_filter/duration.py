from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import BinaryIO

from .errors import MalformedWavError, UnreadableWavError
from .models import WavHeader


WAV_EXTENSION = ".wav"

RIFF_PREAMBLE = struct.Struct("<4sI4s")
CHUNK_HEADER = struct.Struct("<4sI")
# audio_format, channels, sample_rate, byte_rate, block_align, bits_per_sample
FMT_FIELDS = struct.Struct("<HHIIHH")


def is_wav_name(name: str) -> bool:
    return Path(name).suffix.lower() == WAV_EXTENSION


def _stream_size(fileobj: BinaryIO) -> int:
    try:
        return os.fstat(fileobj.fileno()).st_size
    except (AttributeError, OSError, ValueError):
        current = fileobj.tell()
        end = fileobj.seek(0, os.SEEK_END)
        fileobj.seek(current)
        return end


def read_wav_header(fileobj: BinaryIO, source: Path | str = "<stream>") -> WavHeader:
    """Parse the RIFF/WAVE chunk list far enough to recover format and data length.

    Only chunk headers and the ``fmt `` body are read; the data payload is
    skipped with ``seek``. Raises MalformedWavError when the container is
    not a usable WAVE file.
    """
    size = _stream_size(fileobj)
    preamble = fileobj.read(RIFF_PREAMBLE.size)
    if len(preamble) < RIFF_PREAMBLE.size:
        raise MalformedWavError(source, "file too short for a RIFF header")

    riff_id, _, wave_id = RIFF_PREAMBLE.unpack(preamble)
    if riff_id != b"RIFF" or wave_id != b"WAVE":
        raise MalformedWavError(source, "not a RIFF/WAVE container")

    fmt_fields: tuple[int, ...] | None = None
    data_size: int | None = None

    while fmt_fields is None or data_size is None:
        raw = fileobj.read(CHUNK_HEADER.size)
        if len(raw) < CHUNK_HEADER.size:
            break
        chunk_id, chunk_size = CHUNK_HEADER.unpack(raw)
        body_offset = fileobj.tell()
        padded = chunk_size + (chunk_size & 1)

        if chunk_id == b"fmt ":
            if chunk_size < FMT_FIELDS.size:
                raise MalformedWavError(source, f"fmt chunk too short ({chunk_size} bytes)")
            body = fileobj.read(FMT_FIELDS.size)
            if len(body) < FMT_FIELDS.size:
                raise MalformedWavError(source, "truncated fmt chunk")
            fmt_fields = FMT_FIELDS.unpack(body)
        elif chunk_id == b"data":
            if body_offset + chunk_size > size:
                raise MalformedWavError(
                    source,
                    f"truncated data chunk (declares {chunk_size} bytes, {size - body_offset} present)",
                )
            data_size = chunk_size

        fileobj.seek(body_offset + padded)

    if fmt_fields is None:
        raise MalformedWavError(source, "missing fmt chunk")
    if data_size is None:
        raise MalformedWavError(source, "missing data chunk")

    audio_format, channels, sample_rate, _, block_align, bits_per_sample = fmt_fields
    if sample_rate == 0:
        raise MalformedWavError(source, "sample rate is zero")
    if channels == 0:
        raise MalformedWavError(source, "channel count is zero")
    if block_align == 0:
        raise MalformedWavError(source, "block alignment is zero")

    return WavHeader(
        audio_format=audio_format,
        channels=channels,
        sample_rate=sample_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
        data_size=data_size,
    )


def probe_wav(path: Path) -> WavHeader:
    try:
        fileobj = path.open("rb")
    except OSError as exc:
        raise UnreadableWavError(path, exc.strerror or str(exc)) from exc

    with fileobj:
        try:
            return read_wav_header(fileobj, source=path)
        except OSError as exc:
            raise UnreadableWavError(path, exc.strerror or str(exc)) from exc


def compute_duration(path: Path) -> int:
    """Duration of the WAV file at ``path`` in whole milliseconds (floored)."""
    return probe_wav(path).duration_ms
