"""Map one raw upstream record onto the canonical server schema."""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, Optional

from pydantic import HttpUrl, TypeAdapter, ValidationError

from relaydir.normalizers.classifiers import determine_access_type, determine_registration_status
from relaydir.normalizers.dates import Clock, normalize_date, parse_date
from relaydir.normalizers.text import (
    first_list,
    normalize_text,
    pick_first_non_empty,
    pick_first_string,
    slugify,
)
from relaydir.schemas.server import ServerRecord

THEME_PLACEHOLDER = "未設定"
LANGUAGE_PLACEHOLDER = "情報未掲載"
DESCRIPTION_FALLBACK = "詳細は公式募集ページでご確認ください。"
HIGHLIGHTS_FALLBACK = "募集要項やイベント情報はリンク先で確認できます。"
SLOT_PLACEHOLDER = "募集枠はリンク先で確認"

URL_FIELDS = ("url", "website", "homepage", "uri", "instance", "host", "domain", "address")
LAST_REVIEWED_FIELDS = (
    "lastReviewed",
    "lastChecked",
    "checkedAt",
    "updatedAt",
    "updated_at",
    "lastUpdated",
    "last_seen",
    "lastSeen",
)

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_http_url = TypeAdapter(HttpUrl)


def canonical_url(candidate: str) -> Optional[HttpUrl]:
    """Parse candidate as an absolute URL, assuming https:// when no scheme."""
    candidate = candidate.strip()
    if not _SCHEME.match(candidate):
        candidate = "https://" + candidate.lstrip("/")
    try:
        url = _http_url.validate_python(candidate)
    except ValidationError:
        return None
    return url if url.host else None


def _review_date(record: Dict[str, Any], today: Clock) -> str:
    for field in LAST_REVIEWED_FIELDS:
        if parse_date(record.get(field)):
            return normalize_date(record[field], today)
    return normalize_date(None, today)


def normalize_server(record: Any, index: int, today: Clock = date.today) -> Optional[ServerRecord]:
    """Normalize one raw record; None when it has no usable URL identity.

    Each canonical field is resolved from an ordered list of upstream field
    names, first non-empty value winning. Never raises on malformed input.
    """
    if not isinstance(record, dict):
        return None

    url_candidate = pick_first_string(*(record.get(field) for field in URL_FIELDS))
    if not url_candidate:
        return None
    url = canonical_url(url_candidate)
    if url is None:
        return None
    host = url.host or ""

    name = pick_first_non_empty(
        record.get("name"),
        record.get("title"),
        record.get("instanceName"),
        record.get("displayName"),
        record.get("host"),
        record.get("domain"),
        host,
    )
    record_id = pick_first_non_empty(record.get("id"), record.get("slug")) or slugify(host) or slugify(name)

    theme = pick_first_non_empty(
        record.get("theme"),
        record.get("focus"),
        record.get("category"),
        record.get("categories"),
        record.get("topics"),
        record.get("topic"),
    )
    languages = first_list(
        record.get("languages"), record.get("language"), record.get("lang"), record.get("locales")
    )
    description = pick_first_non_empty(
        record.get("description"),
        record.get("summary"),
        record.get("shortDescription"),
        record.get("about"),
    )
    highlights = pick_first_non_empty(
        record.get("highlights"),
        record.get("features"),
        record.get("special"),
        record.get("notesHighlight"),
    )
    tags = first_list(record.get("tags"), record.get("keywords"), record.get("labels"))

    registration_status = determine_registration_status(record)
    access_type = determine_access_type(record, registration_status)

    monthly_relay_slot = pick_first_non_empty(
        record.get("monthlyRelaySlot"),
        record.get("relaySlot"),
        record.get("slot"),
        record.get("schedule"),
        record.get("recruitmentWindow"),
        record.get("applicationWindow"),
    )
    notes = record.get("notes")
    access_note = pick_first_non_empty(
        record.get("accessNote"),
        record.get("inviteNote"),
        record.get("inviteDetail"),
        record.get("registrationNote"),
        record.get("joinNote"),
        notes if isinstance(notes, str) else None,
    )

    return ServerRecord(
        id=record_id or f"server-{index + 1}",
        name=name or normalize_text(url_candidate),
        url=str(url),
        theme=theme or THEME_PLACEHOLDER,
        languages=languages or [LANGUAGE_PLACEHOLDER],
        description=description or DESCRIPTION_FALLBACK,
        highlights=highlights or HIGHLIGHTS_FALLBACK,
        tags=tags,
        registration_status=registration_status,
        access_type=access_type,
        monthly_relay_slot=monthly_relay_slot or SLOT_PLACEHOLDER,
        last_reviewed=_review_date(record, today),
        access_note=access_note or None,
    )
