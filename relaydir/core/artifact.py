"""Output artifact storage with change detection."""

from pathlib import Path
from typing import Optional

from relaydir.core.logging import get_logger

log = get_logger("core.artifact")


class ArtifactStore:
    """Reads and writes the published dataset file.

    The write is skipped when the serialized content is byte-identical to
    what is already on disk, so scheduled runs that change nothing leave
    the working tree clean.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read_previous(self) -> Optional[bytes]:
        """Return the current artifact bytes, or None if there is none."""
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            log.warning(f"Could not read existing dataset {self.path}: {exc}")
            return None

    def write_if_changed(self, content: str) -> bool:
        """Write content unless identical; return True when the file changed."""
        encoded = content.encode("utf-8")
        if self.read_previous() == encoded:
            return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(encoded)
        return True
