"""
Filesystem Storage
==================
Resolves output directories and writes generated header/source files.
Write failures propagate to the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def resolve_dir(path: str) -> Path:
    """Return an absolute directory path; "" and "." mean the current directory."""
    if not path or path == ".":
        return Path.cwd()
    return Path(path).expanduser().absolute()


def header_path(header_dir: str, stem: str) -> Path:
    return resolve_dir(header_dir) / f"{stem}.h"


def source_path(source_dir: str, stem: str, output_type: str) -> Path:
    return resolve_dir(source_dir) / f"{stem}.{output_type}"


def write_text(path: Path, text: str) -> Path:
    """Create parent directories and write text without newline translation."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    logger.debug(f"Wrote {path}")
    return path


def write_files(texts: dict[Path, str]) -> list[Path]:
    """
    Write several files so that either all of them are replaced or none.

    Each text goes to a hidden temporary file beside its target first; the
    targets are replaced only once every temporary file is written.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for path, text in texts.items():
            temp = path.with_name(f".{path.name}.tmp")
            staged.append((temp, path))
            write_text(temp, text)
    except OSError:
        for temp, _ in staged:
            temp.unlink(missing_ok=True)
        raise

    for temp, path in staged:
        temp.replace(path)
        logger.info(f"Wrote {path}")
    return [path for _, path in staged]
