"""Text and collection coercion helpers shared by the normalizers."""

from __future__ import annotations

import re
import unicodedata
from typing import Any, Iterable, List, Optional, Tuple

LIST_DELIMITERS = re.compile(r"[,、/|\n]")
TEXT_JOINER = "／"

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def normalize_text(value: Any) -> str:
    """Coerce any JSON value into a trimmed display string."""
    if value is None or value is False or value == "":
        return ""
    if isinstance(value, (list, tuple)):
        return TEXT_JOINER.join(part for part in (normalize_text(item) for item in value) if part)
    if isinstance(value, dict):
        return TEXT_JOINER.join(part for part in (normalize_text(item) for item in value.values()) if part)
    return str(value).strip()


def pick_first_non_empty(*values: Any) -> str:
    for value in values:
        text = normalize_text(value)
        if text:
            return text
    return ""


def pick_first_string(*values: Any) -> str:
    """Like pick_first_non_empty, but only plain strings qualify."""
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def to_list(value: Any) -> List[str]:
    """Accept a sequence or a delimited string; trim, drop empties, dedupe."""
    if value is None or value is False:
        return []
    if isinstance(value, (list, tuple)):
        items: Iterable[str] = (normalize_text(item) for item in value)
    elif isinstance(value, str):
        items = LIST_DELIMITERS.split(value)
    elif isinstance(value, dict):
        items = (normalize_text(item) for item in value.values())
    else:
        items = [str(value)]
    return unique(item.strip() for item in items)


def unique(items: Iterable[str]) -> List[str]:
    seen: dict[str, None] = {}
    for item in items:
        if item and item not in seen:
            seen[item] = None
    return list(seen)


def first_list(*values: Any) -> List[str]:
    for value in values:
        items = to_list(value)
        if items:
            return items
    return []


def slugify(value: Optional[str]) -> str:
    if not value:
        return ""
    return _SLUG_INVALID.sub("-", value.lower()).strip("-")


def collation_key(value: str) -> Tuple[str, str]:
    """Sort key approximating Japanese collation.

    Width and case are folded with NFKC + casefold and katakana sorts with
    its hiragana counterpart, so カ/か and Ａ/a order together.
    """
    folded = unicodedata.normalize("NFKC", value).casefold()
    kana = "".join(
        chr(ord(ch) - 0x60) if "ァ" <= ch <= "ヶ" else ch for ch in folded
    )
    return kana, value
