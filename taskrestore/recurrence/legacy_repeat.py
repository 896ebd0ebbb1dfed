"""Translate legacy repeat settings to iCalendar RRULE strings."""

from __future__ import annotations

from enum import Enum


class LegacyRepeatInterval(str, Enum):
    """Repeat units understood by the legacy data model."""
    DAYS = "DAYS"
    WEEKS = "WEEKS"
    MONTHS = "MONTHS"
    HOURS = "HOURS"


_FREQ_MAP: dict[LegacyRepeatInterval, str] = {
    LegacyRepeatInterval.DAYS: "DAILY",
    LegacyRepeatInterval.WEEKS: "WEEKLY",
    LegacyRepeatInterval.MONTHS: "MONTHLY",
    LegacyRepeatInterval.HOURS: "HOURLY",
}

# Singular spellings seen in hand-edited backups
_ALIASES: dict[str, LegacyRepeatInterval] = {
    "DAY": LegacyRepeatInterval.DAYS,
    "WEEK": LegacyRepeatInterval.WEEKS,
    "MONTH": LegacyRepeatInterval.MONTHS,
    "HOUR": LegacyRepeatInterval.HOURS,
}


def parse_repeat_interval(token: str) -> LegacyRepeatInterval:
    """Parse a legacy interval token (case-insensitive). Raises ValueError if unknown."""
    key = (token or "").strip().upper()
    if key in _ALIASES:
        return _ALIASES[key]
    return LegacyRepeatInterval(key)


def legacy_repeat_to_rrule(interval: LegacyRepeatInterval | str, value: int) -> str:
    """Convert (interval, value) to an RRULE (without the leading 'RRULE:' prefix).

    Args:
        interval: Legacy unit, as enum or raw token
        value: Repeat every `value` units; must be positive

    Raises:
        ValueError: unknown interval or non-positive value
    """
    if not isinstance(interval, LegacyRepeatInterval):
        interval = parse_repeat_interval(interval)
    if int(value) < 1:
        raise ValueError(f"Repeat value must be positive, got {value}")

    parts = [f"FREQ={_FREQ_MAP[interval]}"]
    if int(value) != 1:
        parts.append(f"INTERVAL={int(value)}")
    return ";".join(parts)
