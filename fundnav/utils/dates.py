"""
Timestamp helpers shared by the CLI, feeds and audit log.

Valuation state stores epoch seconds; files and the CLI use ISO strings.
"""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(s: str) -> datetime:
    """Parse ISO timestamp string to an aware UTC datetime. Raises ValueError on failure."""
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_epoch_seconds(s: str | int) -> int:
    """Accept epoch seconds (int or digit string) or an ISO timestamp."""
    if isinstance(s, int):
        return s
    s = str(s).strip()
    if s.lstrip("-").isdigit():
        return int(s)
    return int(parse_timestamp(s).timestamp())


def epoch_to_iso(epoch: int) -> str:
    return datetime.fromtimestamp(int(epoch), tz=timezone.utc).isoformat()
