"""HTTP source implementation (relay endpoints)."""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from relaydir.core.errors import NoJsonCandidate
from relaydir.core.logging import get_logger
from .base import BaseSource
from .payload import JsonValue, extract_json_candidates

log = get_logger("ingestion.http")


class HttpSource(BaseSource):
    """Fetches a relay endpoint; JSON directly, otherwise JSON embedded in HTML."""

    def __init__(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.identifier = url
        self.headers = headers or {}
        self.timeout = timeout
        self.transport = transport

    async def fetch(self) -> JsonValue:
        async with httpx.AsyncClient(
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            resp = await client.get(self.url)
            resp.raise_for_status()

        content_type = resp.headers.get("content-type", "")
        if "json" in content_type.lower():
            return resp.json()

        candidates = extract_json_candidates(resp.text)
        if not candidates:
            raise NoJsonCandidate(f"No JSON candidates discovered in HTML response from {self.url}")
        log.debug(f"Found {len(candidates)} embedded JSON candidates at {self.url}")
        return candidates[0]

    def describe(self, source_name: str) -> str:
        return f"{source_name} ({self.url})"
