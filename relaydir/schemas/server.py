"""Published dataset schema (consumed by the static directory page)."""

import json
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ServerRecord(BaseModel):
    """One normalized community server entry."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    url: str
    theme: str
    languages: List[str]
    description: str
    highlights: str
    tags: List[str]
    registration_status: Literal["open", "closed"]
    access_type: Literal["open", "invite"]
    monthly_relay_slot: str
    last_reviewed: str
    access_note: Optional[str] = None


class Dataset(BaseModel):
    """Top-level artifact document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    updated_at: str
    source: str
    servers: List[ServerRecord]

    def to_json(self) -> str:
        """Stable, diff-friendly serialization with a trailing newline."""
        payload = self.model_dump(by_alias=True, exclude_none=True)
        return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
