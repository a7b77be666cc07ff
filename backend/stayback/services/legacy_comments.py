"""Codec for security updates historically stored inside approval comments.

Two encodings exist in older data:

    SECURITY_TRACKING:<officerId>:<officerName> - <IN|OUT>[: note]
    [SECURITY UPDATE] Student marked as <IN|OUT> by Security: <name>[-<note>]

New check-ins live in the ``security_checkins`` table; this module renders the
tag shown alongside them and parses old comment text so it can be imported.
"""
import re
from dataclasses import dataclass
from typing import Iterable, Optional

TRACKING_PREFIX = "SECURITY_TRACKING:"
UPDATE_TAG = "[SECURITY UPDATE]"

_TRACKING_RE = re.compile(
    r"^SECURITY_TRACKING:(?P<officer_id>[^:]+):(?P<name>.+?) - (?P<direction>IN|OUT)(?:: (?P<note>.*))?$"
)
_UPDATE_RE = re.compile(
    r"\[SECURITY UPDATE\] Student marked as (?P<direction>IN|OUT) by Security: (?P<name>[^-]+)(?:-(?P<note>.+))?"
)


@dataclass(frozen=True)
class ParsedSecurityUpdate:
    direction: str
    officer_name: str
    officer_id: Optional[str] = None
    note: Optional[str] = None


def format_tracking_comment(officer_id: str, officer_name: str, direction: str, note: Optional[str] = None) -> str:
    text = f"{TRACKING_PREFIX}{officer_id}:{officer_name} - {direction}"
    if note:
        text += f": {note}"
    return text


def format_update_line(officer_name: str, direction: str, note: Optional[str] = None) -> str:
    text = f"{UPDATE_TAG} Student marked as {direction} by Security: {officer_name}"
    if note:
        text += f"-{note}"
    return text


def parse_line(line: str) -> Optional[ParsedSecurityUpdate]:
    """Parse one line in either encoding; None if it carries no security update."""
    line = line.strip()
    m = _TRACKING_RE.match(line)
    if m:
        return ParsedSecurityUpdate(
            direction=m.group("direction"),
            officer_name=m.group("name").strip(),
            officer_id=m.group("officer_id"),
            note=(m.group("note") or None),
        )
    m = _UPDATE_RE.search(line)
    if m:
        note = m.group("note")
        return ParsedSecurityUpdate(
            direction=m.group("direction"),
            officer_name=m.group("name").strip(),
            note=note.strip() if note else None,
        )
    return None


def parse_comment(comment: Optional[str]) -> list[ParsedSecurityUpdate]:
    """All security updates in a comment, in the order they were appended."""
    if not comment:
        return []
    updates = []
    for line in comment.splitlines():
        parsed = parse_line(line)
        if parsed:
            updates.append(parsed)
    return updates


def current_status_from_comments(comments: Iterable[Optional[str]]) -> Optional[str]:
    """Direction of the last security update across comments given oldest first."""
    latest = None
    for comment in comments:
        updates = parse_comment(comment)
        if updates:
            latest = updates[-1].direction
    return latest
