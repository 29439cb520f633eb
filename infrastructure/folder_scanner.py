"""Discovery of drawable images inside a folder."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

IMAGE_EXTENSIONS: frozenset[str] = frozenset({".jpg", ".jpeg", ".png", ".webp"})


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def scan_images(folder: str | Path) -> list[str]:
    """Return absolute paths of images under `folder`, sorted by file name.

    Hidden files and directories are skipped. Returns [] if the folder is
    missing or unreadable.
    """
    root = Path(folder).expanduser()
    if not str(folder) or not root.is_dir():
        logger.warning("Image folder not found: {}", folder)
        return []

    results: list[str] = []

    def _on_error(ex: OSError) -> None:
        logger.warning("Scan error under {}: {}", root, ex)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = [d for d in dirnames if not _is_hidden(d)]
        for name in filenames:
            if _is_hidden(name):
                continue
            if Path(name).suffix.lower() in IMAGE_EXTENSIONS:
                results.append(str(Path(dirpath, name).resolve()))

    results.sort(key=lambda p: (Path(p).name.lower(), p))
    logger.info("Scanned {}: {} images", root, len(results))
    return results
