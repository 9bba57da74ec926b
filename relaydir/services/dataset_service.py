"""End-to-end relay sync: resolve a source, normalize, assemble, publish."""

from __future__ import annotations

import re
from collections import Counter
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from relaydir.core.artifact import ArtifactStore
from relaydir.core.config import Settings, settings as default_settings
from relaydir.core.errors import EmptyNormalizedSet
from relaydir.core.logging import get_logger
from relaydir.ingestion.base import BaseSource
from relaydir.ingestion.file_source import FileSource
from relaydir.ingestion.http_source import HttpSource
from relaydir.ingestion.payload import JsonValue, find_updated_at
from relaydir.ingestion.runner import EndpointResolver
from relaydir.normalizers.dates import Clock, format_date
from relaydir.normalizers.servers import normalize_server
from relaydir.normalizers.text import collation_key
from relaydir.schemas.server import Dataset, ServerRecord

log = get_logger("dataset_service")

_URL_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


class DatasetService:
    """Builds the published server directory from the relay service.

    Responsibilities:
    - Pick candidate sources (override or built-in endpoints)
    - Resolve the first source with a locatable server array
    - Normalize every record and drop the unusable ones
    - Sort, enforce unique ids, and write the artifact only when it changed
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        *,
        source_override: Optional[str] = None,
        output_path: Optional[str | Path] = None,
        today: Clock = date.today,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config or default_settings
        self.source_override = source_override or self.config.RELAY_SOURCE
        self.store = ArtifactStore(output_path or self.config.OUTPUT_PATH)
        self.today = today
        self.transport = transport

    async def run(self, dry_run: bool = False) -> Dict[str, Any]:
        """Run the pipeline once; raises RelaySyncError subclasses on failure."""
        resolved = await EndpointResolver(self.build_sources()).resolve()
        label = resolved.source.describe(self.config.RELAY_SOURCE_NAME)

        dataset = self.assemble(resolved.root, resolved.records, label)
        content = dataset.to_json()

        if dry_run:
            written = False
            log.info(f"Dry run: {len(dataset.servers)} entries from {resolved.source.identifier}, nothing written")
        elif self.store.write_if_changed(content):
            written = True
            log.info(f"Relay dataset updated with {len(dataset.servers)} entries from {resolved.source.identifier}.")
        else:
            written = False
            log.info("Relay dataset is already up to date.")

        return {
            "success": True,
            "records_processed": len(dataset.servers),
            "source": label,
            "written": written,
            "output_path": str(self.store.path),
        }

    # -------------------------------------------------------------------------
    # Sources
    # -------------------------------------------------------------------------
    def build_sources(self) -> List[BaseSource]:
        if self.source_override:
            return [self._make_source(self.source_override)]
        return [self._make_source(url) for url in self.config.RELAY_ENDPOINTS]

    def _make_source(self, location: str) -> BaseSource:
        if _URL_SCHEME.match(location):
            return HttpSource(
                location,
                headers=self.config.request_headers,
                timeout=self.config.http_timeout,
                transport=self.transport,
            )
        return FileSource(location)

    # -------------------------------------------------------------------------
    # Assembly
    # -------------------------------------------------------------------------
    def assemble(self, root: JsonValue, records: List[JsonValue], source_label: str) -> Dataset:
        servers = self.normalize(records)
        if not servers:
            raise EmptyNormalizedSet(len(records))

        servers.sort(key=lambda server: collation_key(server.name))
        servers = self._ensure_unique_ids(servers)

        updated_at = find_updated_at(root) or format_date(self.today())
        return Dataset(updated_at=updated_at, source=source_label, servers=servers)

    def normalize(self, records: List[JsonValue]) -> List[ServerRecord]:
        servers: List[ServerRecord] = []
        for index, record in enumerate(records):
            server = normalize_server(record, index, today=self.today)
            if server is not None:
                servers.append(server)

        dropped = len(records) - len(servers)
        if dropped:
            log.debug(f"Dropped {dropped} records without a usable URL (input={len(records)} output={len(servers)})")
        return servers

    @staticmethod
    def _ensure_unique_ids(servers: List[ServerRecord]) -> List[ServerRecord]:
        """Suffix repeated ids with -2, -3, ... in sorted order."""
        counts = Counter(server.id for server in servers)
        if all(count == 1 for count in counts.values()):
            return servers

        taken = set(counts)
        seen: Dict[str, int] = {}
        result: List[ServerRecord] = []
        for server in servers:
            occurrence = seen.get(server.id, 0) + 1
            seen[server.id] = occurrence
            if occurrence == 1:
                result.append(server)
                continue

            suffix = occurrence
            candidate = f"{server.id}-{suffix}"
            while candidate in taken:
                suffix += 1
                candidate = f"{server.id}-{suffix}"
            taken.add(candidate)
            log.warning(f"Duplicate server id {server.id!r}; using {candidate!r} for {server.url}")
            result.append(server.model_copy(update={"id": candidate}))
        return result
