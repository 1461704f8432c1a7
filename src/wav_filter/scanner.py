from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Callable, Optional

from .duration import is_wav_name
from .errors import TraversalError
from .models import FileCandidate

logger = logging.getLogger(__name__)


def check_input_root(root: Path) -> Path:
    root = root.absolute()
    if not root.exists():
        raise TraversalError(f"Input directory does not exist: {root}")
    if not root.is_dir():
        raise TraversalError(f"Input path is not a directory: {root}")
    return root


def iter_wav_files(
    root: Path,
    exclude: Optional[Path] = None,
    warn: Optional[Callable[[str], None]] = None,
) -> Iterator[FileCandidate]:
    """Yield every regular ``.wav`` file under ``root``.

    Root validation happens immediately; the walk itself is lazy. Symlinked
    directories are not followed and symlinked files are skipped, so the
    walk always terminates. ``exclude`` prunes one directory (and everything
    below it) from the walk.
    """
    root = check_input_root(root)
    excluded = exclude.absolute() if exclude is not None else None
    return _walk(root, excluded, warn)


def _walk(
    root: Path,
    exclude: Optional[Path],
    warn: Optional[Callable[[str], None]],
) -> Iterator[FileCandidate]:
    def _warn(message: str) -> None:
        logger.warning(message)
        if warn:
            warn(message)

    def _on_walk_error(err: OSError) -> None:
        target = getattr(err, "filename", None) or str(root)
        _warn(f"walk error: {target}: {err.strerror or str(err)}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        base = Path(dirpath)
        if exclude is not None:
            dirnames[:] = [name for name in dirnames if base / name != exclude]
        for name in filenames:
            if not is_wav_name(name):
                continue
            path = base / name
            try:
                if path.is_symlink():
                    logger.debug("symlink skipped: %s", path)
                    continue
                if not path.is_file():
                    continue
            except OSError as exc:
                _warn(f"file skipped: {path}: {exc}")
                continue
            yield FileCandidate(absolute_path=path, relative_path=path.relative_to(root))
