"""Keyword heuristics for registration status and access type."""

from __future__ import annotations

import re
from typing import Any, Dict, Literal

from relaydir.normalizers.text import normalize_text, to_list

RegistrationStatus = Literal["open", "closed"]
AccessType = Literal["open", "invite"]

REGISTRATION_FIELDS = (
    "registrationStatus",
    "status",
    "open",
    "openRegistrations",
    "open_registration",
    "registrationOpen",
    "acceptingRegistrations",
    "isAccepting",
    "joinable",
    "active",
    "isOpen",
    "opened",
    "join_status",
    "joinStatus",
)

ACCESS_FIELDS = (
    "accessType",
    "inviteType",
    "invitation",
    "registration",
    "registrationMethod",
    "registration_method",
    "registration_mode",
    "joinMethod",
    "access",
    "inviteOnly",
    "isInviteOnly",
    "requiresInvite",
    "requireInvite",
    "invite_required",
    "joinPolicy",
    "join_policy",
)

REGISTRATION_OPEN = re.compile(r"open|accept|募集|available|true|yes", re.IGNORECASE)
REGISTRATION_CLOSED = re.compile(r"close|stop|pause|full|満員|停止|false|\bno\b", re.IGNORECASE)
REGISTRATION_BOOLISH: Dict[str, RegistrationStatus] = {"1": "open", "0": "closed"}

ACCESS_INVITE = re.compile(r"invite|invitation|招待|コード|code|approval|manual|closed|application|審査")
ACCESS_OPEN = re.compile(r"open|public|instant|auto|自由")
TAG_INVITE = re.compile(r"invite|コード|approval|招待")


def determine_registration_status(record: Dict[str, Any]) -> RegistrationStatus:
    """First decisive candidate wins; open when nothing decides."""
    for field in REGISTRATION_FIELDS:
        candidate = record.get(field)
        if isinstance(candidate, bool):
            return "open" if candidate else "closed"
        if isinstance(candidate, int):
            return "open" if candidate != 0 else "closed"
        if isinstance(candidate, str):
            if candidate.strip() in REGISTRATION_BOOLISH:
                return REGISTRATION_BOOLISH[candidate.strip()]
            if REGISTRATION_OPEN.search(candidate):
                return "open"
            if REGISTRATION_CLOSED.search(candidate):
                return "closed"
    return "open"


def determine_access_type(record: Dict[str, Any], registration: RegistrationStatus) -> AccessType:
    """Classify invite-only versus open joining.

    Explicit access fields are checked first (booleans read as "invite
    only"), then tag/keyword text is scanned for invite hints. With no
    signal at all the access type follows the registration status.
    """
    for field in ACCESS_FIELDS:
        candidate = record.get(field)
        if candidate is None:
            continue
        if isinstance(candidate, bool):
            return "invite" if candidate else "open"
        text = normalize_text(candidate).lower()
        if not text:
            continue
        if ACCESS_INVITE.search(text):
            return "invite"
        if ACCESS_OPEN.search(text):
            return "open"

    hints = " ".join(to_list(record.get("tags") or record.get("keywords"))).lower()
    if TAG_INVITE.search(hints):
        return "invite"

    return "open" if registration == "open" else "invite"
