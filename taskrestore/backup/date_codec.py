"""Date codec for legacy backup timestamps.

Legacy backups write instants as ``yyyy-MM-ddTHH:mm:ss`` followed by an
optional zone designator, for example::

    2009-07-28T14:22:05PDT
    2009-07-28T14:22:05-0700
    2009-07-28T14:22:05GMT-07:00
    2009-07-28T14:22:05Z

Parsed values are returned as naive UTC datetimes, which is how the store
keeps instants.
"""

from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Optional, Union

from dateutil import tz

_BACKUP_DATE_RE = re.compile(
    r"^\s*(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.\d+)?\s*(\S*)\s*$"
)
_NUMERIC_OFFSET_RE = re.compile(r"^(?:GMT|UTC)?([+-])(\d{1,2}):?(\d{2})$")

# Abbreviations the legacy writer emitted (java.text.SimpleDateFormat "z")
_LEGACY_ZONE_OFFSETS_HOURS: dict[str, int] = {
    "Z": 0,
    "GMT": 0,
    "UTC": 0,
    "UT": 0,
    "WET": 0,
    "BST": 1,
    "CET": 1,
    "CEST": 2,
    "EET": 2,
    "EEST": 3,
    "HST": -10,
    "AKST": -9,
    "AKDT": -8,
    "PST": -8,
    "PDT": -7,
    "MST": -7,
    "MDT": -6,
    "CST": -6,
    "CDT": -5,
    "EST": -5,
    "EDT": -4,
    "JST": 9,
}


def resolve_timezone(zone: Union[str, tzinfo, None]) -> tzinfo:
    """Resolve a zone name (IANA or legacy abbreviation) to a tzinfo, UTC if unknown."""
    if zone is None:
        return tz.UTC
    if isinstance(zone, tzinfo):
        return zone
    return _zone_from_designator(zone.strip()) or tz.UTC


def _zone_from_designator(designator: str) -> Optional[tzinfo]:
    upper = designator.upper()
    if upper in _LEGACY_ZONE_OFFSETS_HOURS:
        hours = _LEGACY_ZONE_OFFSETS_HOURS[upper]
        return tz.UTC if hours == 0 else tz.tzoffset(upper, hours * 3600)

    match = _NUMERIC_OFFSET_RE.match(upper)
    if match:
        sign, hours, minutes = match.groups()
        seconds = int(hours) * 3600 + int(minutes) * 60
        return tz.tzoffset(None, -seconds if sign == "-" else seconds)

    # Region names such as "America/Los_Angeles"
    return tz.gettz(designator)


def parse_backup_date(value: Optional[str], default_tz: Union[str, tzinfo, None] = None) -> Optional[datetime]:
    """Parse a legacy backup timestamp into a naive UTC datetime.

    Args:
        value: Raw attribute text
        default_tz: Zone applied when the value carries no designator (UTC if None)

    Returns:
        Naive UTC datetime, or None when the value is missing or not parseable
    """
    if not value:
        return None
    match = _BACKUP_DATE_RE.match(value)
    if not match:
        return None

    year, month, day, hour, minute, second, designator = match.groups()
    if designator:
        zone = _zone_from_designator(designator)
        if zone is None:
            return None
    else:
        zone = resolve_timezone(default_tz)

    try:
        local = datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), tzinfo=zone
        )
        # Converting near year 1 or 9999 can leave the datetime range.
        return local.astimezone(tz.UTC).replace(tzinfo=None)
    except (ValueError, OverflowError):
        return None


def format_display_date(value: datetime) -> str:
    """Human-readable date used in upgrade notes, e.g. 'Jul 28, 2009'."""
    return f"{value:%b} {value.day}, {value.year}"
