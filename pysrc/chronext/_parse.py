import re
from datetime import datetime as _datetime, timedelta as _timedelta
from typing import Optional

from ._common import RANGE_ERRORS, UTC, Millis, ms_from_aware, ms_from_local

# Date-only forms are interpreted as UTC, date-time forms without
# an offset as local time.
_match_date = re.compile(
    r"(\d{4})(?:-(\d{2})(?:-(\d{2}))?)?", re.ASCII
).fullmatch
_match_datetime = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,9}))?)?"
    r"(?:([Zz])|([+-])([01]\d|2[0-3]):?([0-5]\d))?",
    re.ASCII,
).fullmatch


def _parse_millis(s: Optional[str]) -> int:
    # digits beyond milliseconds are truncated
    return int(s[:3].ljust(3, "0")) if s else 0


def _date_from_iso(m: re.Match) -> Millis:
    year, month, day = m.groups()
    return ms_from_aware(
        _datetime(int(year), int(month or 1), int(day or 1), tzinfo=UTC)
    )


def _datetime_from_iso(m: re.Match) -> Optional[Millis]:
    (
        year,
        month,
        day,
        hour,
        minute,
        second,
        fraction,
        zulu,
        sign,
        offset_hrs,
        offset_mins,
    ) = m.groups()
    millis = _parse_millis(fraction)
    # 24:00 is allowed, meaning the end of the day
    end_of_day = hour == "24" and minute == "00" and not (
        int(second or 0) or millis
    )
    dt = _datetime(
        int(year),
        int(month),
        int(day),
        0 if end_of_day else int(hour),
        int(minute),
        int(second or 0),
        millis * 1_000,
    )
    if end_of_day:
        dt += _timedelta(days=1)

    if zulu:
        return ms_from_aware(dt.replace(tzinfo=UTC))
    elif sign:
        offset = _timedelta(hours=int(offset_hrs), minutes=int(offset_mins))
        if sign == "-":
            offset = -offset
        return ms_from_aware(dt.replace(tzinfo=UTC) - offset)
    else:
        return ms_from_local(dt)


def ms_from_iso(s: str) -> Optional[Millis]:
    """Parse an ISO 8601 date or date-time to a timestamp.
    Returns None if the string can't be parsed or is out of range.

    Accepted formats are ``YYYY``, ``YYYY-MM``, ``YYYY-MM-DD`` (all UTC) and
    ``YYYY-MM-DDTHH:MM[:SS[.fff]]`` optionally followed by ``Z`` or
    ``±HH:MM``. Without an offset, date-times are in the system timezone.
    """
    s = s.strip()
    try:
        if m := _match_date(s):
            return _date_from_iso(m)
        elif m := _match_datetime(s):
            return _datetime_from_iso(m)
    except RANGE_ERRORS:
        return None
    return None
