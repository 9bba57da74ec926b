"""Locate server records inside undocumented JSON or HTML payloads.

The relay service publishes no schema, so nothing here assumes a shape:
script blocks are probed for embedded JSON, and the JSON tree is walked
depth-first (bounded by MAX_DEPTH) looking for an array of server-like
mappings under the most likely container keys first.
"""

from __future__ import annotations

import json
import re
from typing import Dict, List, Optional, Union

from bs4 import BeautifulSoup

from relaydir.normalizers.dates import format_date, looks_like_date, parse_date

JsonValue = Union[None, bool, int, float, str, List["JsonValue"], Dict[str, "JsonValue"]]

MAX_DEPTH = 6

IDENTITY_KEYS = ("url", "host", "instance", "domain")
CONTAINER_KEYS = ("servers", "instances", "items", "data", "result", "relays", "list")
UPDATED_AT_KEYS = ("updatedAt", "updated_at", "lastUpdated", "last_checked", "lastChecked")

_ASSIGNMENT_PREFIXES = (
    re.compile(r"^\s*window\.[A-Za-z0-9_$.]+\s*=\s*"),
    re.compile(r"^\s*(?:const|var|let)\s+[A-Za-z0-9_$]+\s*=\s*"),
)
_TRAILING_TERMINATOR = re.compile(r";\s*$")


def _strip_assignment(script: str) -> str:
    for prefix in _ASSIGNMENT_PREFIXES:
        script = prefix.sub("", script, count=1)
    return _TRAILING_TERMINATOR.sub("", script).strip()


def extract_json_candidates(html: str) -> List[JsonValue]:
    """Return every script block that parses as JSON, in document order."""
    soup = BeautifulSoup(html, "html.parser")
    candidates: List[JsonValue] = []
    for script in soup.find_all("script"):
        cleaned = _strip_assignment((script.string or "").strip())
        if not cleaned:
            continue
        try:
            candidates.append(json.loads(cleaned))
        except ValueError:
            continue
    return candidates


def _is_server_like(item: JsonValue) -> bool:
    return isinstance(item, dict) and any(item.get(key) for key in IDENTITY_KEYS)


def find_server_array(payload: JsonValue, depth: int = 0) -> Optional[List[JsonValue]]:
    """Find the first array holding at least one server-like mapping."""
    if depth > MAX_DEPTH or payload is None:
        return None

    if isinstance(payload, list):
        return payload if any(_is_server_like(item) for item in payload) else None

    if not isinstance(payload, dict):
        return None

    for key in CONTAINER_KEYS:
        if key in payload:
            found = find_server_array(payload[key], depth + 1)
            if found is not None:
                return found

    for value in payload.values():
        found = find_server_array(value, depth + 1)
        if found is not None:
            return found

    return None


def find_updated_at(payload: JsonValue, depth: int = 0) -> Optional[str]:
    """Search for a dataset-level "last updated" date.

    Known keys at each mapping level win; otherwise nested values are
    scanned depth-first and only date-shaped strings are accepted.
    """
    if depth > MAX_DEPTH or payload is None:
        return None

    if isinstance(payload, str):
        if looks_like_date(payload):
            parsed = parse_date(payload)
            return format_date(parsed) if parsed else None
        return None

    if isinstance(payload, dict):
        for key in UPDATED_AT_KEYS:
            parsed = parse_date(payload.get(key))
            if parsed:
                return format_date(parsed)
        children: List[JsonValue] = list(payload.values())
    elif isinstance(payload, list):
        children = payload
    else:
        return None

    for child in children:
        found = find_updated_at(child, depth + 1)
        if found:
            return found
    return None
