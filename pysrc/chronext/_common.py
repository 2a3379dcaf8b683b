"""Conversions between millisecond timestamps and local (system timezone)
datetimes."""

import sys
from datetime import datetime as _datetime, timedelta as _timedelta, timezone as _timezone
from typing import Optional

UTC = _timezone.utc
EPOCH = _datetime(1970, 1, 1, tzinfo=UTC)
Millis = int  # milliseconds since the Unix epoch

MS_PER_SECOND = 1_000
MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000

_ONE_MS = _timedelta(milliseconds=1)
_fromtimestamp = _datetime.fromtimestamp

# The errors the stdlib raises when a datetime leaves its supported range.
# OSError is raised by some platforms' localtime() for far-away timestamps.
RANGE_ERRORS = (OverflowError, ValueError, OSError)

# Which fold puts a skipped (DST gap) local time *after* the gap.
# This was changed (fixed) in Python 3.12. See cpython/issues/83861
_GAP_FOLD = 0 if sys.version_info > (3, 12) else 1


def local_from_ms(ms: Millis) -> Optional[_datetime]:
    """The aware local datetime at the given timestamp,
    or None if it's out of range."""
    secs, millis = divmod(ms, MS_PER_SECOND)
    try:
        local = _fromtimestamp(secs, UTC).astimezone(None)
    except RANGE_ERRORS:
        return None
    # astimezone() may cross a year boundary at the edges of the range
    if not 1 <= local.year <= 9999:  # pragma: no cover
        return None
    return local.replace(microsecond=millis * 1_000)


def ms_from_aware(dt: _datetime) -> Millis:
    return (dt - EPOCH) // _ONE_MS


def ms_from_local(dt: _datetime) -> Optional[Millis]:
    """Resolve a naive local datetime to a timestamp, the way the system
    clock does: skipped times move forward by the length of the gap,
    repeated times resolve to the earlier occurrence."""
    assert dt.tzinfo is None
    try:
        norm = dt.replace(fold=0).astimezone(UTC)
        # Non-existent times don't survive a roundtrip
        if norm.astimezone(None).replace(tzinfo=None) != dt:
            norm = dt.replace(fold=_GAP_FOLD).astimezone(UTC)
    except RANGE_ERRORS:
        return None
    return ms_from_aware(norm)
