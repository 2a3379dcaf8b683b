"""Calendar helpers: leap years, month lengths, day and week numbering."""

from datetime import date as _date


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


# 1-indexed days per month
_MONTHDAYS = [0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def days_in_month_carrying(year: int, month: int) -> int:
    """Length of the given 1-indexed month, where months outside 1-12 carry
    into neighbouring years (month 13 is January of the next year,
    month 0 is December of the previous one)."""
    year_carry, month0 = divmod(month - 1, 12)
    return days_in_month(year + year_carry, month0 + 1)


def weekday(d: _date) -> int:
    """Day of the week, where Sunday is 0"""
    return d.isoweekday() % 7


def day_of_year(d: _date) -> int:
    return d.toordinal() - _date(d.year, 1, 1).toordinal() + 1


def week_number(d: _date, first_weekday: int) -> int:
    """Number of the week containing the date. The (partial) week containing
    January 1st is week 0; a new week starts on every ``first_weekday``
    (0 is Sunday)."""
    n = day_of_year(d) + weekday(_date(d.year, 1, 1)) - first_weekday - 1
    # truncating division: negative values early in January stay in week 0
    return n // 7 if n >= 0 else -(-n // 7)
