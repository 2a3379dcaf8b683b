# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - A Moment is either valid (it has a timestamp) or invalid (it has none).
#   Invalid moments are never an error: every operation passes them along,
#   returning an invalid Moment, NaN or None.
# - Calendar fields are always *local*: they're read and written in the
#   system timezone, like the system clock does.
# - Field arithmetic carries over like the system clock's field setters:
#   January 31st plus one month is March 3rd (or 2nd), not February 28th.
from __future__ import annotations

__version__ = "0.3.1"

import enum
import re
from datetime import (
    date as _date,
    datetime as _datetime,
    timedelta as _timedelta,
)
from math import isfinite, nan as _NAN
from struct import pack as _pack, unpack as _unpack
from time import time_ns
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Mapping,
    no_type_check,
)

from . import _math
from ._common import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    RANGE_ERRORS,
    Millis,
    local_from_ms,
    ms_from_aware,
    ms_from_local,
)
from ._parse import ms_from_iso

__all__ = [
    # Types
    "Moment",
    "FieldDelta",
    "FieldSet",
    "Weekday",
    # Construction
    "of",
    "nan",
    # Operations on moments
    "format",
    "add",
    "sub",
    "diff",
    "abs_diff",
    "compare",
    "equals",
    "replace",
    "unpack",
    "clone",
    "timestamp",
    "day_of_year",
    "week_number",
    "days_in_month",
    # Constants
    "SUNDAY",
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "MS_PER_SECOND",
    "MS_PER_MINUTE",
    "MS_PER_HOUR",
    "MS_PER_DAY",
]


class Weekday(enum.IntEnum):
    """The days of the week; ``.value`` counts from Sunday as 0,
    matching :attr:`Moment.weekday`"""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


SUNDAY = Weekday.SUNDAY
MONDAY = Weekday.MONDAY
TUESDAY = Weekday.TUESDAY
WEDNESDAY = Weekday.WEDNESDAY
THURSDAY = Weekday.THURSDAY
FRIDAY = Weekday.FRIDAY
SATURDAY = Weekday.SATURDAY

# Helpers that pre-compute/lookup as much as possible
_object_new = object.__new__
_UNSET: Any = object()
_FIELDS = (
    "year",
    "month",
    "day",
    "hour",
    "minute",
    "second",
    "millisecond",
)
_DELTA_FIELDS = (
    "years",
    "months",
    "days",
    "hours",
    "minutes",
    "seconds",
    "milliseconds",
    "timestamp",
)
_MAX_ARGS = len(_FIELDS)


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


def _check_int(name: str, value: object) -> None:
    if not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value)!r}")


@final
class FieldDelta(_ImmutableBase):
    """An amount to add to (or subtract from) a :class:`Moment`,
    field by field. Fields left out are zero, i.e. they have no effect.

    ``timestamp`` is an exact number of milliseconds, applied after all
    calendar fields.

    Example
    -------
    >>> FieldDelta(months=1, days=-2)
    FieldDelta(months=1, days=-2)
    >>> -FieldDelta(hours=3)
    FieldDelta(hours=-3)
    """

    __slots__ = _DELTA_FIELDS

    years: int
    months: int
    days: int
    hours: int
    minutes: int
    seconds: int
    milliseconds: int
    timestamp: int

    def __init__(
        self,
        *,
        years: int = 0,
        months: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        timestamp: int = 0,
    ) -> None:
        amounts = (
            years,
            months,
            days,
            hours,
            minutes,
            seconds,
            milliseconds,
            timestamp,
        )
        for name, value in zip(_DELTA_FIELDS, amounts):
            _check_int(name, value)
            setattr(self, name, value)

    def _amounts(self) -> tuple[int, ...]:
        return tuple(getattr(self, name) for name in _DELTA_FIELDS)

    @classmethod
    def _from_amounts(cls, amounts: tuple[int, ...]) -> FieldDelta:
        self = _object_new(cls)
        for name, value in zip(_DELTA_FIELDS, amounts):
            setattr(self, name, value)
        return self

    def __neg__(self) -> FieldDelta:
        """Negate every field

        Example
        -------
        >>> -FieldDelta(years=1, days=-4)
        FieldDelta(years=-1, days=4)
        """
        return self._from_amounts(tuple(-n for n in self._amounts()))

    def __pos__(self) -> FieldDelta:
        return self

    def __bool__(self) -> bool:
        """True if any field is non-zero"""
        return any(self._amounts())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldDelta):
            return NotImplemented
        return self._amounts() == other._amounts()

    def __hash__(self) -> int:
        return hash(self._amounts())

    def __repr__(self) -> str:
        given = ", ".join(
            f"{name}={value}"
            for name, value in zip(_DELTA_FIELDS, self._amounts())
            if value
        )
        return f"FieldDelta({given})"

    @no_type_check
    def __reduce__(self):
        return _unpkl_fdelta, self._amounts()


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_fdelta(*amounts: int) -> FieldDelta:
    return FieldDelta._from_amounts(amounts)


@final
class FieldSet(_ImmutableBase):
    """The calendar fields of a :class:`Moment`, as used by
    :meth:`Moment.replace` and returned by :meth:`Moment.unpack`.
    Fields which aren't given are ``None``. The month is 1-based.

    Example
    -------
    >>> FieldSet(year=2025, day=3)
    FieldSet(year=2025, day=3)
    >>> Moment.of(2025, 1, 2, 3, 4, 5, 6).unpack()
    FieldSet(year=2025, month=1, day=2, hour=3, minute=4, second=5, millisecond=6)
    """

    __slots__ = _FIELDS

    year: int | None
    month: int | None
    day: int | None
    hour: int | None
    minute: int | None
    second: int | None
    millisecond: int | None

    def __init__(
        self,
        *,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
        hour: int | None = None,
        minute: int | None = None,
        second: int | None = None,
        millisecond: int | None = None,
    ) -> None:
        values = (year, month, day, hour, minute, second, millisecond)
        for name, value in zip(_FIELDS, values):
            if value is not None:
                _check_int(name, value)
            setattr(self, name, value)

    def _values(self) -> tuple[int | None, ...]:
        return tuple(getattr(self, name) for name in _FIELDS)

    def as_dict(self) -> dict[str, int]:
        """The fields which are given, in order from year to millisecond

        Example
        -------
        >>> FieldSet(day=3, year=2025).as_dict()
        {'year': 2025, 'day': 3}
        """
        return {
            name: value
            for name, value in zip(_FIELDS, self._values())
            if value is not None
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldSet):
            return NotImplemented
        return self._values() == other._values()

    def __hash__(self) -> int:
        return hash(self._values())

    def __repr__(self) -> str:
        given = ", ".join(f"{k}={v}" for k, v in self.as_dict().items())
        return f"FieldSet({given})"

    @no_type_check
    def __reduce__(self):
        return _unpkl_fset, self._values()


@no_type_check
def _unpkl_fset(*values: int | None) -> FieldSet:
    return FieldSet(**dict(zip(_FIELDS, values)))


def _now_ms() -> Millis:
    return time_ns() // 1_000_000


def _local_fields(dt: _datetime) -> list[int]:
    # The month is 0-based here, so that it can carry over into the year
    return [
        dt.year,
        dt.month - 1,
        dt.day,
        dt.hour,
        dt.minute,
        dt.second,
        dt.microsecond // 1_000,
    ]


def _ms_from_fields(
    year: int,
    month0: int,
    day: int = 1,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> Millis | None:
    """Resolve local calendar fields to a timestamp. Out-of-range fields
    carry over into the next larger field (e.g. day 32 of January is
    February 1st, month 12 is January of the next year)."""
    year_carry, month0 = divmod(month0, 12)
    try:
        local = _datetime(year + year_carry, month0 + 1, 1) + _timedelta(
            days=day - 1,
            hours=hour,
            minutes=minute,
            seconds=second,
            milliseconds=millisecond,
        )
    except RANGE_ERRORS:
        return None
    return ms_from_local(local)


def _ms_from_value(value: object) -> Millis | None:
    if isinstance(value, Moment):
        return value._ms
    elif isinstance(value, str):
        return ms_from_iso(value)
    elif isinstance(value, int):
        return value
    elif isinstance(value, float):
        # fractional milliseconds are truncated towards zero
        return int(value) if isfinite(value) else None
    elif isinstance(value, _datetime):
        if value.tzinfo is None:
            return ms_from_local(
                value.replace(microsecond=value.microsecond // 1_000 * 1_000)
            )
        try:
            return ms_from_aware(value)
        except RANGE_ERRORS:
            return None
    elif isinstance(value, _date):
        return _ms_from_fields(value.year, value.month - 1, value.day)
    raise TypeError(
        f"Expected a timestamp, string, Moment or datetime, got {type(value)!r}"
    )


def _ms_from_args(args: tuple[Any, ...]) -> Millis | None:
    if not args:
        return _now_ms()
    elif len(args) == 1:
        return _ms_from_value(args[0])
    elif len(args) > _MAX_ARGS:
        raise TypeError(
            f"expected at most {_MAX_ARGS} arguments, got {len(args)}"
        )
    year, month, *rest = args
    _check_int("year", year)
    _check_int("month", month)
    for name, value in zip(_FIELDS[2:], rest):
        if value is not None:
            _check_int(name, value)
    return _ms_from_fields(
        year,
        month - 1,
        *(
            default if value is None else value
            for value, default in zip(rest, (1, 0, 0, 0, 0))
        ),
    )


def _pad(value: int, width: int) -> str:
    return str(value).rjust(width, "0")


def _format_offset(dt: _datetime, sep: str = "") -> str:
    offset = _offset_minutes(dt)
    hrs, mins = divmod(abs(offset), 60)
    return f"{'-' if offset < 0 else '+'}{hrs:02d}{sep}{mins:02d}"


def _offset_minutes(dt: _datetime) -> int:
    secs = int(dt.utcoffset().total_seconds())  # type: ignore[union-attr]
    # truncated towards zero, for historical offsets with seconds
    return secs // 60 if secs >= 0 else -(-secs // 60)


# strftime-style directives, applied to the local datetime of a moment
_DIRECTIVES: Mapping[str, Callable[[_datetime], str]] = {
    "H": lambda dt: _pad(dt.hour, 2),
    "I": lambda dt: _pad(dt.hour % 12 or 12, 2),
    "M": lambda dt: _pad(dt.minute, 2),
    "S": lambda dt: _pad(dt.second, 2),
    "U": lambda dt: _pad(_math.week_number(dt.date(), SUNDAY), 2),
    "W": lambda dt: _pad(_math.week_number(dt.date(), MONDAY), 2),
    "Y": lambda dt: _pad(dt.year, 4),
    "d": lambda dt: _pad(dt.day, 2),
    "f": lambda dt: _pad(dt.microsecond // 1_000, 3),
    "j": lambda dt: _pad(_math.day_of_year(dt.date()), 3),
    "m": lambda dt: _pad(dt.month, 2),
    "w": lambda dt: _pad(_math.weekday(dt.date()), 1),
    "y": lambda dt: _pad(dt.year % 100, 2),
    "z": _format_offset,
}
# Invalid moments have no fields to format
_INVALID_FIELD = "NaN"
_sub_directives = re.compile(r"%(.)").sub


@final
class Moment(_ImmutableBase):
    """A point in time, with calendar fields in the system timezone.
    A moment may also be *invalid*: it then represents no time at all.

    Construct it with :meth:`of` (or the constructor, which takes the same
    arguments), and :meth:`nan` for an invalid moment.

    Example
    -------
    >>> d = Moment.of(2025, 1, 31, 9)
    >>> d
    Moment(2025-01-31T09:00:00.000+01:00)
    >>> d.add(months=1)
    Moment(2025-03-03T09:00:00.000+01:00)
    >>> d.format("%Y-%m-%d week %W")
    '2025-01-31 week 04'
    >>> Moment.nan().add(days=1).is_valid()
    False

    Note
    ----
    The calendar fields are determined once, when the moment is created.
    Changing the system timezone afterwards doesn't affect existing moments.
    """

    __slots__ = ("_ms", "_local")

    # The timestamp (ms since the Unix epoch) and the aware local datetime.
    # Both are None for an invalid moment.
    _ms: Millis | None
    _local: _datetime | None

    def __init__(self, *args: Any) -> None:
        self._set_ms(_ms_from_args(args))

    def _set_ms(self, ms: Millis | None) -> None:
        self._local = None if ms is None else local_from_ms(ms)
        self._ms = None if self._local is None else ms

    @classmethod
    def of(cls, *args: Any) -> Moment:
        """Create a moment. The meaning of the arguments depends on
        how many are given:

        - none: the current time
        - one: a timestamp in milliseconds, an ISO 8601 string,
          a :class:`~datetime.datetime`, :class:`~datetime.date`,
          or another moment
        - two to seven: the local ``year, month, day, hour, minute, second,
          millisecond``. The month is 1-based.
          Omitted fields are 1 (day) or 0 (the rest).
          Out-of-range fields carry over, e.g. day 32 of January
          is February 1st.

        Values that can't be represented (unparseable strings,
        years outside 1-9999) result in an invalid moment.

        Example
        -------
        >>> Moment.of(2025, 1, 2, 3, 4, 5)
        Moment(2025-01-02T03:04:05.000+01:00)
        >>> Moment.of(0)
        Moment(1970-01-01T01:00:00.000+01:00)
        >>> Moment.of("2025-01-02T03:04Z")
        Moment(2025-01-02T04:04:00.000+01:00)
        >>> Moment.of("not a date").is_valid()
        False
        """
        return cls(*args)

    @classmethod
    def now(cls) -> Moment:
        """The current time. Same as ``Moment.of()``."""
        return cls._from_ms(_now_ms())

    @classmethod
    def nan(cls) -> Moment:
        """The invalid moment

        Example
        -------
        >>> Moment.nan()
        Moment(Invalid Date)
        """
        return cls._from_ms(None)

    @staticmethod
    def days_in_month(year: int, month: int, /) -> int:
        """The number of days in the given (1-based) month

        Months outside 1-12 carry over into the neighbouring years.

        Example
        -------
        >>> Moment.days_in_month(2024, 2)
        29
        >>> Moment.days_in_month(2025, 2)
        28
        """
        _check_int("year", year)
        _check_int("month", month)
        return _math.days_in_month_carrying(year, month)

    def is_valid(self) -> bool:
        """Whether this moment represents an actual point in time"""
        return self._ms is not None

    @property
    def year(self) -> int | None:
        return None if self._local is None else self._local.year

    @property
    def month(self) -> int | None:
        """The month, from 1 to 12"""
        return None if self._local is None else self._local.month

    @property
    def day(self) -> int | None:
        return None if self._local is None else self._local.day

    @property
    def hour(self) -> int | None:
        return None if self._local is None else self._local.hour

    @property
    def minute(self) -> int | None:
        return None if self._local is None else self._local.minute

    @property
    def second(self) -> int | None:
        return None if self._local is None else self._local.second

    @property
    def millisecond(self) -> int | None:
        return None if self._local is None else self._local.microsecond // 1_000

    @property
    def weekday(self) -> Weekday | None:
        """The day of the week, where Sunday is 0"""
        return (
            None
            if self._local is None
            else Weekday(_math.weekday(self._local.date()))
        )

    @property
    def offset(self) -> int | None:
        """The offset from UTC in minutes, positive east of Greenwich"""
        return None if self._local is None else _offset_minutes(self._local)

    def timestamp(self) -> Millis | float:
        """Milliseconds since the Unix epoch, or NaN for an invalid moment

        Example
        -------
        >>> Moment.of("1970-01-02").timestamp()
        86400000
        """
        return _NAN if self._ms is None else self._ms

    def day_of_year(self) -> int | None:
        """The day of the year, where January 1st is day 1

        Example
        -------
        >>> Moment.of(2026, 12, 31).day_of_year()
        365
        """
        return (
            None
            if self._local is None
            else _math.day_of_year(self._local.date())
        )

    def week_number(self, first_weekday: int = SUNDAY, /) -> int | None:
        """The week of the year. The week containing January 1st is week 0,
        and a new week starts on each ``first_weekday``.
        This is the number formatted by ``%U`` (Sunday) and ``%W`` (Monday).

        Example
        -------
        >>> Moment.of(2026, 1, 4).week_number()
        1
        >>> Moment.of(2026, 1, 4).week_number(MONDAY)
        0
        """
        _check_int("first_weekday", first_weekday)
        return (
            None
            if self._local is None
            else _math.week_number(self._local.date(), first_weekday)
        )

    def format(self, pattern: str, /) -> str:
        """Format with strftime-style directives. Each ``%`` followed by
        a directive character is replaced:

        ==== ===============================================
        %H   hour (00-23)
        %I   hour on a 12-hour clock (01-12)
        %M   minute (00-59)
        %S   second (00-59)
        %f   millisecond (000-999)
        %Y   year (4 digits)
        %y   year without century (00-99)
        %m   month (01-12)
        %d   day of the month (01-31)
        %j   day of the year (001-366)
        %w   day of the week, Sunday is 0 (0-6)
        %U   week of the year, weeks starting on Sunday (00-53)
        %W   week of the year, weeks starting on Monday (00-53)
        %z   UTC offset (``+HHMM`` or ``-HHMM``)
        ==== ===============================================

        For other characters, the ``%`` is dropped and the character kept,
        so ``%%`` gives ``%``. An invalid moment formats each directive
        as ``NaN``.

        Example
        -------
        >>> Moment.of(2005, 1, 2, 3, 4, 5).format("%Y(%y)-%m-%d %H:%M:%S")
        '2005(05)-01-02 03:04:05'
        >>> Moment.of(2025, 1, 1, 15).format("%I o'clock, 100%%")
        "03 o'clock, 100%"
        """
        if not isinstance(pattern, str):
            raise TypeError(f"Expected str, got {type(pattern)!r}")
        local = self._local

        def _render(m: re.Match) -> str:
            char = m[1]
            try:
                render = _DIRECTIVES[char]
            except KeyError:
                return char
            return _INVALID_FIELD if local is None else render(local)

        return _sub_directives(_render, pattern)

    def add(self, delta: FieldDelta = _UNSET, /, **kwargs: int) -> Moment:
        """Add a :class:`FieldDelta`, or its fields as keyword arguments.

        The fields are applied one by one, each to the result of the
        previous: years, months, days, hours, minutes, seconds,
        milliseconds, and finally the exact ``timestamp`` milliseconds.
        Each step changes one local field and lets overflowing values
        carry over into the larger fields. This means the day of the month
        is *not* clamped: January 31st plus one month is March 3rd
        (or March 2nd in a leap year).

        Example
        -------
        >>> d = Moment.of(2025, 1, 31)
        >>> d.add(months=1)
        Moment(2025-03-03T00:00:00.000+01:00)
        >>> d.add(FieldDelta(years=1, hours=-1))
        Moment(2026-01-30T23:00:00.000+01:00)
        """
        return self._add_delta(_as_delta(delta, kwargs))

    def sub(self, delta: FieldDelta = _UNSET, /, **kwargs: int) -> Moment:
        """Subtract a :class:`FieldDelta`, or its fields as keyword arguments.
        Same as adding the negated delta.

        Example
        -------
        >>> Moment.of(2025, 1, 1).sub(days=1)
        Moment(2024-12-31T00:00:00.000+01:00)
        """
        return self._add_delta(-_as_delta(delta, kwargs))

    def _add_delta(self, delta: FieldDelta) -> Moment:
        local = self._local
        if local is None:
            return Moment.nan()
        ms = self._ms
        *field_amounts, exact = delta._amounts()
        for index, amount in enumerate(field_amounts):
            if not amount:
                continue
            fields = _local_fields(local)
            fields[index] += amount
            ms = _ms_from_fields(*fields)
            if ms is None or (local := local_from_ms(ms)) is None:
                return Moment.nan()
        return Moment._from_ms(ms + exact)  # type: ignore[operator]

    def replace(self, fields: FieldSet = _UNSET, /, **kwargs: int) -> Moment:
        """Create a new moment with the given fields replaced.
        The fields are given as a :class:`FieldSet` or as keyword arguments.
        The month is 1-based. Out-of-range fields carry over, as in
        :meth:`of`.

        An invalid moment has no fields to keep, so the result is only
        valid if all seven fields are given.

        Example
        -------
        >>> d = Moment.of(2025, 1, 31, 12)
        >>> d.replace(month=4, hour=8)
        Moment(2025-05-01T08:00:00.000+02:00)
        >>> Moment.nan().replace(year=2025).is_valid()
        False
        """
        if kwargs:
            if fields is not _UNSET:
                raise TypeError("Cannot mix positional and keyword arguments")
            fields = FieldSet(**kwargs)
        elif fields is _UNSET:
            return self.clone()
        elif not isinstance(fields, FieldSet):
            raise TypeError(f"Expected FieldSet, got {type(fields)!r}")

        given = fields.as_dict()
        if self._local is None:
            if len(given) < len(_FIELDS):
                return Moment.nan()
            current = {}
        else:
            current = self.unpack().as_dict()
        merged = {**current, **given}
        merged["month"] -= 1
        return Moment._from_ms(
            _ms_from_fields(*(merged[name] for name in _FIELDS))
        )

    def unpack(self) -> FieldSet:
        """All calendar fields. They are ``None`` for an invalid moment.

        Example
        -------
        >>> Moment.of(2025, 1, 2, 3, 4, 5, 6).unpack()
        FieldSet(year=2025, month=1, day=2, hour=3, minute=4, second=5, millisecond=6)
        >>> Moment.nan().unpack()
        FieldSet()
        """
        local = self._local
        if local is None:
            return FieldSet()
        year, month0, *rest = _local_fields(local)
        return FieldSet(**dict(zip(_FIELDS, (year, month0 + 1, *rest))))

    def clone(self) -> Moment:
        """A new moment with the same timestamp"""
        return Moment._from_ms_unchecked(self._ms, self._local)

    def diff(self, other: Moment, /) -> Millis | float:
        """The milliseconds from ``other`` to this moment.
        NaN if either is invalid, or ``other`` isn't a moment.

        Example
        -------
        >>> Moment.of(2025, 1, 5).diff(Moment.of(2025, 1, 3))
        172800000
        """
        if (
            not isinstance(other, Moment)
            or self._ms is None
            or other._ms is None
        ):
            return _NAN
        return self._ms - other._ms

    def abs_diff(self, other: Moment, /) -> Millis | float:
        """The absolute number of milliseconds between the moments.
        NaN if either is invalid, or ``other`` isn't a moment."""
        return abs(self.diff(other))

    def compare(self, other: Moment, /) -> Millis | None | bool:
        """Compare to another moment: the result is negative if this moment
        is earlier, zero if equal, and positive if later.
        The result is ``None`` if either moment is invalid,
        and ``False`` if ``other`` isn't a moment at all.

        Example
        -------
        >>> Moment.of(2024, 1).compare(Moment.of(2025, 1)) < 0
        True
        >>> Moment.of(2024, 1).compare(Moment.nan()) is None
        True
        """
        if not isinstance(other, Moment):
            return False
        elif self._ms is None or other._ms is None:
            return None
        return self._ms - other._ms

    def equals(self, other: object, /) -> bool:
        """Whether ``other`` is a moment at the same time.
        Like NaN, an invalid moment doesn't equal anything, not even
        another invalid moment.
        """
        return (
            isinstance(other, Moment)
            and self._ms is not None
            and self._ms == other._ms
        )

    def __eq__(self, other: object) -> bool:
        """Compare for equality, see :meth:`equals`

        Example
        -------
        >>> Moment.of(0) == Moment.of("1970-01-01T00:00Z")
        True
        >>> Moment.nan() == Moment.nan()
        False
        """
        if not isinstance(other, Moment):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._ms)

    def __lt__(self, other: Moment) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return (cmp := self.compare(other)) is not None and cmp < 0

    def __le__(self, other: Moment) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return (cmp := self.compare(other)) is not None and cmp <= 0

    def __gt__(self, other: Moment) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return (cmp := self.compare(other)) is not None and cmp > 0

    def __ge__(self, other: Moment) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return (cmp := self.compare(other)) is not None and cmp >= 0

    def py_datetime(self) -> _datetime:
        """Convert to an aware :class:`~datetime.datetime` in the system
        timezone. Raises ``ValueError`` for an invalid moment."""
        if self._local is None:
            raise ValueError("Cannot convert an invalid Moment to datetime")
        return self._local

    def format_common_iso(self) -> str:
        """Format as ``YYYY-MM-DDTHH:MM:SS.fff±HH:MM``,
        or ``Invalid Date`` for an invalid moment.

        Example
        -------
        >>> Moment.of(2025, 1, 2, 3, 4, 5, 6).format_common_iso()
        '2025-01-02T03:04:05.006+01:00'
        """
        local = self._local
        if local is None:
            return "Invalid Date"
        return (
            f"{local.year:04d}-{local.month:02d}-{local.day:02d}T"
            f"{local.hour:02d}:{local.minute:02d}:{local.second:02d}."
            f"{local.microsecond // 1_000:03d}{_format_offset(local, ':')}"
        )

    __str__ = format_common_iso

    def __repr__(self) -> str:
        return f"Moment({self})"

    @classmethod
    def _from_ms(cls, ms: Millis | None, /) -> Moment:
        self = _object_new(cls)
        self._set_ms(ms)
        return self

    @classmethod
    def _from_ms_unchecked(
        cls, ms: Millis | None, local: _datetime | None, /
    ) -> Moment:
        self = _object_new(cls)
        self._ms = ms
        self._local = local
        return self

    @no_type_check
    def __reduce__(self):
        return _unpkl_moment, (
            b"" if self._ms is None else _pack("<q", self._ms),
        )


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_moment(data: bytes) -> Moment:
    return Moment._from_ms(_unpack("<q", data)[0] if data else None)


def _as_delta(delta: FieldDelta, kwargs: Mapping[str, int]) -> FieldDelta:
    if kwargs:
        if delta is not _UNSET:
            raise TypeError("Cannot mix positional and keyword arguments")
        return FieldDelta(**kwargs)
    elif delta is _UNSET:
        return _ZERO_DELTA
    elif not isinstance(delta, FieldDelta):
        raise TypeError(f"Expected FieldDelta, got {type(delta)!r}")
    return delta


_ZERO_DELTA = FieldDelta()


def of(*args: Any) -> Moment:
    """Create a :class:`Moment`. Alias for :meth:`Moment.of`."""
    return Moment(*args)


def nan() -> Moment:
    """The invalid moment. Alias for :meth:`Moment.nan`."""
    return Moment.nan()


days_in_month = Moment.days_in_month

# The operations on moments are also available as functions,
# which take the moment as first argument: ``add(m, days=1)``
format = Moment.format
add = Moment.add
sub = Moment.sub
diff = Moment.diff
abs_diff = Moment.abs_diff
compare = Moment.compare
equals = Moment.equals
replace = Moment.replace
unpack = Moment.unpack
clone = Moment.clone
timestamp = Moment.timestamp
day_of_year = Moment.day_of_year
week_number = Moment.week_number


# We expose the public members in the root of the module.
# For clarity, we remove the "_pymoment" part from the names,
# since this is an implementation detail.
for name in __all__:
    member = locals()[name]
    if getattr(member, "__module__", None) == __name__:  # pragma: no branch
        member.__module__ = "chronext"

# clear up loop variables so they don't leak into the namespace
del name
del member

for _unpkl in (_unpkl_moment, _unpkl_fdelta, _unpkl_fset):
    _unpkl.__module__ = "chronext"


# disable further subclassing
final(_ImmutableBase)



def _patch_time_frozen(ms: Millis) -> None:
    global time_ns

    def time_ns() -> int:
        return ms * 1_000_000


def _patch_time_keep_ticking(ms: Millis) -> None:
    global time_ns

    _patched_at = time_ns()
    _time_ns = time_ns

    def time_ns() -> int:
        return ms * 1_000_000 + _time_ns() - _patched_at


def _unpatch_time() -> None:
    global time_ns

    from time import time_ns
