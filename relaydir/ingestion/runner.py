"""Endpoint resolution: try candidate sources in order until one yields records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import httpx

from relaydir.core.errors import NoServerArray, NoViableSource, SourceError
from relaydir.core.logging import get_logger
from .base import BaseSource
from .payload import JsonValue, find_server_array

log = get_logger("ingestion.runner")


@dataclass
class ResolvedPayload:
    root: JsonValue
    records: List[JsonValue]
    source: BaseSource


class EndpointResolver:
    """Runs candidate sources strictly in order, stopping at the first success."""

    def __init__(self, sources: List[BaseSource]):
        self.sources = sources

    async def resolve(self) -> ResolvedPayload:
        attempted: List[str] = []

        for source in self.sources:
            attempted.append(source.identifier)
            try:
                root = await source.fetch()
                records = find_server_array(root)
                if not records:
                    raise NoServerArray(f"No server array found in payload from {source.identifier}")
            except (SourceError, httpx.HTTPError, httpx.InvalidURL, OSError, ValueError, RecursionError) as exc:
                log.warning(f"{source.identifier}: {exc}")
                continue

            log.info(f"Source={source.identifier} located={len(records)}")
            return ResolvedPayload(root=root, records=records, source=source)

        raise NoViableSource(attempted)
