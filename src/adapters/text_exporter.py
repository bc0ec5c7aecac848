"""Text file export adapter.

Implements the core ExportSinkPort by writing UTF-8 files into a directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class TextFileExporter:
    """Writes exports without ever overwriting an earlier file."""

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)

    def _unique_path(self, filename: str) -> Path:
        path = self._directory / filename
        if not path.exists():
            return path
        stem, suffix = path.stem, path.suffix
        counter = 1
        while True:
            candidate = self._directory / f"{stem} ({counter}){suffix}"
            if not candidate.exists():
                return candidate
            counter += 1

    def write(self, filename: str, content: str) -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._unique_path(filename)
        path.write_text(content, encoding="utf-8")
        LOGGER.info("Wrote %s bytes to %s", len(content.encode("utf-8")), path)
        return path
