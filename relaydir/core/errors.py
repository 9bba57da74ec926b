"""Error taxonomy for the relay sync pipeline."""

from __future__ import annotations

from typing import List


class RelaySyncError(Exception):
    """Base class for pipeline failures."""


class SourceError(RelaySyncError):
    """A single candidate source could not provide a usable payload."""


class NoJsonCandidate(SourceError):
    """An HTML/text body contained no script block that parses as JSON."""


class NoServerArray(SourceError):
    """The payload parsed, but no server-like record array was found in it."""


class NoViableSource(RelaySyncError):
    """Every candidate source failed."""

    def __init__(self, attempted: List[str]):
        self.attempted = attempted
        super().__init__(
            f"Unable to locate relay server data from any source ({len(attempted)} tried)"
        )


class EmptyNormalizedSet(RelaySyncError):
    """Normalization dropped every located record."""

    def __init__(self, located: int):
        self.located = located
        super().__init__(f"No valid server entries were produced from {located} located records")
