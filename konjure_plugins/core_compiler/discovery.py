# konjure_plugins/core_compiler/discovery.py
import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def search(root: Path, recursive: bool, files: Optional[List[Path]] = None) -> List[Path]:
    """
    Lists every entry under ``root`` in directory-listing order.

    With ``recursive`` set, a directory's own entries are collected before the
    directory itself. Directories stay in the result; filtering by suffix is
    left to the caller. A directory that cannot be listed contributes nothing.
    """
    if files is None:
        files = []

    try:
        entries = list(root.iterdir())
    except OSError as e:
        logger.debug(f"Could not list '{root}': {e}")
        return files

    for entry in entries:
        if recursive and entry.is_dir():
            search(entry, True, files)
        files.append(entry)

    return files
