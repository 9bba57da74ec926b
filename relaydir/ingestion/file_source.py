"""Local JSON file source (seed dataset or manual override)."""

from __future__ import annotations

import json
from pathlib import Path

from relaydir.core.logging import get_logger
from .base import BaseSource
from .payload import JsonValue

log = get_logger("ingestion.file")


class FileSource(BaseSource):
    """Reads a JSON document from disk. No HTML fallback for local files."""

    def __init__(self, file_path: str | Path):
        self.file_path = Path(file_path)
        self.identifier = str(self.file_path)

    async def fetch(self) -> JsonValue:
        with self.file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        log.info(f"Loaded local payload from {self.file_path}")
        return data

    def describe(self, source_name: str) -> str:
        return f"{source_name} (seed dataset: {self.file_path})"
