"""Small helpers for creating output files and directories."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TextIO

__all__ = ["create_file", "create_directory"]

_log = logging.getLogger(__name__)


def create_file(file_path: str | os.PathLike) -> TextIO:
    """Open ``file_path`` for appending text, creating it if needed."""
    try:
        return open(file_path, "a", encoding="utf-8")
    except OSError:
        _log.warning("cannot create file: %s", file_path)
        raise


def create_directory(directory_path: str | os.PathLike) -> Path:
    """Create a single directory unless it already exists; return its path."""
    path = Path(directory_path)
    if not path.is_dir():
        try:
            path.mkdir()
        except OSError:
            _log.warning("cannot create directory: %s", path)
            raise
    if not path.is_dir():
        _log.warning("cannot create directory: %s", path)
        raise NotADirectoryError(str(path))
    return path