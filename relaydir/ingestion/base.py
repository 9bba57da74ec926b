"""Abstract source interface for ingestion."""

from __future__ import annotations

from abc import ABC, abstractmethod

from relaydir.ingestion.payload import JsonValue


class BaseSource(ABC):
    """A candidate location the relay listing may be fetched from."""

    identifier: str

    @abstractmethod
    async def fetch(self) -> JsonValue:
        """Fetch and decode the raw payload (raises on any failure)."""

    @abstractmethod
    def describe(self, source_name: str) -> str:
        """Human-readable label for the dataset ``source`` field."""
