from __future__ import annotations

import logging
from pathlib import Path

from mutagen.wave import WAVE

logger = logging.getLogger(__name__)


def _first(value: object) -> str:
    if value is None:
        return ""
    text = getattr(value, "text", value)
    if isinstance(text, list):
        if not text:
            return ""
        return str(text[0]).strip()
    return str(text).strip()


def _tag_value(tags: object, *keys: str) -> str:
    if tags is None:
        return ""

    for key in keys:
        try:
            value = tags.get(key)
        except (KeyError, ValueError):
            value = None
        if value:
            return _first(value)

    return ""


def read_wav_tags(path: Path) -> dict[str, str]:
    """Title and artist from the WAV's embedded ID3 chunk, empty when absent."""
    try:
        audio = WAVE(str(path))
    except Exception as exc:
        logger.debug("tags unavailable: %s: %s", path, exc)
        return {"title": "", "artist": ""}

    tags = audio.tags
    return {
        "title": _tag_value(tags, "TIT2"),
        "artist": _tag_value(tags, "TPE1", "TPE2"),
    }
