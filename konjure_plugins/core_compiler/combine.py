# konjure_plugins/core_compiler/combine.py
import os
import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .contracts import CombineError, CompileExtension

logger = logging.getLogger(__name__)


def combine(
    files: Iterable[Path],
    extension: CompileExtension,
    log: Optional[logging.Logger] = None,
) -> Tuple[str, int]:
    """
    Concatenates every entry whose name ends with the extension's suffix.

    Each line is re-terminated with the platform line separator, so a file
    lacking a trailing newline still ends with one. Returns the buffer and
    the number of files combined.
    """
    log = log or logger
    parts = []
    count = 0

    for file in files:
        if not file.name.endswith(extension.suffix):
            continue
        try:
            with open(file, "r", encoding="utf-8") as f:
                for line in f:
                    parts.append(line[:-1] if line.endswith("\n") else line)
                    parts.append(os.linesep)
        except (OSError, UnicodeDecodeError) as e:
            raise CombineError(f"Could not read '{file}': {e}") from e
        count += 1

    log.info(f"Processing {count} {extension.suffix} files.")
    return "".join(parts), count
