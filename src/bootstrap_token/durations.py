"""Duration parsing and short human-readable rendering.

Durations are written the way operators already type them for cluster
tooling: a sequence of ``<number><unit>`` pairs such as ``24h``,
``1h30m`` or ``90s``. The bare string ``"0"`` means a zero duration.
"""
from __future__ import annotations

import datetime
import re

from bootstrap_token.errors import InvalidFormatError

_UNITS: dict[str, float] = {
    "h": 3600.0,
    "m": 60.0,
    "s": 1.0,
    "ms": 0.001,
}

_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")


def parse_duration(text: str) -> datetime.timedelta:
    """Parse a duration such as ``"24h"`` or ``"1h30m"``.

    Raises
    ------
    InvalidFormatError
        If *text* is empty or contains anything other than unit pairs.
    """
    if text == "0":
        return datetime.timedelta(0)

    total = 0.0
    position = 0
    for match in _PART_RE.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(text):
        raise InvalidFormatError(
            f"invalid duration {text!r}; expected a value such as '24h' or '1h30m'",
            action="parse",
        )
    return datetime.timedelta(seconds=total)


def short_human_duration(delta: datetime.timedelta) -> str:
    """Render *delta* with a single coarse unit, e.g. ``"23h"`` or ``"6d"``.

    Negative durations of more than one second render as ``"<invalid>"``;
    anything between -1s and 0s renders as ``"0s"``.
    """
    seconds = int(delta.total_seconds())
    if seconds < -1:
        return "<invalid>"
    if seconds < 0:
        return "0s"
    if seconds < 60:
        return f"{seconds}s"

    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m"

    hours = minutes // 60
    if hours < 24:
        return f"{hours}h"
    if hours < 24 * 365:
        return f"{hours // 24}d"
    return f"{hours // 24 // 365}y"


def format_rfc3339(moment: datetime.datetime) -> str:
    """Return *moment* as an RFC3339 UTC timestamp with second resolution."""
    return to_utc(moment).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_rfc3339(text: str) -> datetime.datetime:
    """Parse an RFC3339 timestamp into a timezone-aware UTC datetime.

    Raises
    ------
    ValueError
        If *text* is not a valid timestamp.
    """
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.datetime.fromisoformat(text))


def to_utc(moment: datetime.datetime) -> datetime.datetime:
    """Return *moment* in UTC, treating naive datetimes as already UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=datetime.timezone.utc)
    return moment.astimezone(datetime.timezone.utc)
