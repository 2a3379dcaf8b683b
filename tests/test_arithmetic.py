import pickle

import pytest
from hypothesis import given
from hypothesis.strategies import integers

from chronext import (
    MS_PER_DAY,
    MS_PER_HOUR,
    FieldDelta,
    add,
    nan,
    of,
    sub,
)

from .common import AlwaysEqual, NeverEqual, system_tz_ams, system_tz_utc

# 1900-01-01 up to 2100-01-01, UTC
TIMESTAMPS = integers(-2_208_988_800_000, 4_102_444_800_000)


class TestAdd:

    @pytest.mark.parametrize(
        "kwargs, expect",
        [
            ({"years": 5}, (2030, 1, 1)),
            ({"months": 13}, (2026, 2, 1)),
            ({"days": 40}, (2025, 2, 10)),
            ({"hours": 10}, (2025, 1, 1, 10, 0, 0, 0)),
            ({"minutes": 70}, (2025, 1, 1, 1, 10, 0, 0)),
            ({"seconds": -1}, (2024, 12, 31, 23, 59, 59, 0)),
            ({"milliseconds": 100}, (2025, 1, 1, 0, 0, 0, 100)),
            ({"timestamp": MS_PER_DAY}, (2025, 1, 2)),
            ({"months": -1}, (2024, 12, 1)),
            ({"months": -13}, (2023, 12, 1)),
            ({"years": 1, "months": 2, "days": 3}, (2026, 3, 4)),
        ],
    )
    @system_tz_ams()
    def test_fields(self, kwargs, expect):
        m = of(2025, 1, 1)
        assert m.add(**kwargs) == of(*expect)
        assert m.add(FieldDelta(**kwargs)) == of(*expect)

    def test_nothing(self):
        m = of(2025, 1, 1)
        assert m.add() == m
        assert m.add() is not m
        assert m.add(FieldDelta()) == m

    @pytest.mark.parametrize(
        "start, kwargs, expect",
        [
            # the day isn't clamped to the end of the month
            ((2025, 1, 31), {"months": 1}, (2025, 3, 3)),
            ((2024, 1, 31), {"months": 1}, (2024, 3, 2)),
            ((2025, 3, 31), {"months": 1}, (2025, 5, 1)),
            ((2025, 3, 31), {"months": -1}, (2025, 3, 3)),
            ((2024, 2, 29), {"years": 1}, (2025, 3, 1)),
            ((2024, 2, 29), {"years": 4}, (2028, 2, 29)),
            ((2025, 12, 31), {"days": 1}, (2026, 1, 1)),
        ],
    )
    def test_rollover(self, start, kwargs, expect):
        assert of(*start).add(**kwargs) == of(*expect)

    def test_order_of_fields(self):
        # months before days: Jan 31 -> Mar 2 -> Mar 3,
        # not Jan 31 -> Feb 1 -> Mar 1
        assert of(2024, 1, 31).add(months=1, days=1) == of(2024, 3, 3)
        # years before months: Feb 29 -> Mar 1 -> Apr 1,
        # not Feb 29 -> Mar 29 -> Mar 29
        assert of(2024, 2, 29).add(years=1, months=1) == of(2025, 4, 1)
        # the exact timestamp comes last
        assert of(2025, 1, 31).add(
            months=1, timestamp=-MS_PER_DAY
        ) == of(2025, 3, 2)

    @system_tz_ams()
    def test_across_dst(self):
        d = of(2025, 3, 29, 12)
        # a calendar day keeps the time of day...
        assert d.add(days=1) == of(2025, 3, 30, 12)
        assert d.add(days=1).diff(d) == 23 * MS_PER_HOUR
        # ...while the timestamp is exact
        assert d.add(timestamp=MS_PER_DAY) == of(2025, 3, 30, 13)

    @system_tz_ams()
    def test_into_skipped_time(self):
        d = of(2025, 3, 30, 1, 30)
        shifted = d.add(hours=1)
        assert (shifted.hour, shifted.minute) == (3, 30)
        assert shifted.diff(d) == MS_PER_HOUR

    def test_invalid_moment(self):
        assert not nan().add(days=1).is_valid()
        assert not nan().add(timestamp=1).is_valid()
        assert not nan().add().is_valid()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"years": 10_000},
            {"years": -2025},
            {"months": 12 * 8000},
            {"days": 1 << 64},
            {"hours": -(1 << 64)},
            {"timestamp": 1 << 60},
        ],
    )
    def test_out_of_range(self, kwargs):
        assert not of(2025, 1, 1).add(**kwargs).is_valid()

    def test_out_of_range_at_the_edge(self):
        assert not of(9999, 12, 31).add(days=1).is_valid()
        assert not of(9999, 12, 31).sub(years=9999).is_valid()

    def test_invalid_args(self):
        m = of(2025, 1, 1)
        with pytest.raises(TypeError, match="mix"):
            m.add(FieldDelta(days=1), days=1)

        with pytest.raises(TypeError, match="FieldDelta"):
            m.add(5)  # type: ignore[arg-type]

        with pytest.raises(TypeError, match="days"):
            m.add(days=1.5)  # type: ignore[arg-type]

        with pytest.raises(TypeError, match="weeks"):
            m.add(weeks=1)

    def test_as_function(self):
        m = of(2025, 1, 1)
        assert add(m, days=1) == m.add(days=1)
        assert add(m, FieldDelta(days=1)) == m.add(days=1)

    def test_receiver_unchanged(self):
        m = of(2025, 1, 31)
        m.add(months=1, days=4)
        assert m == of(2025, 1, 31)


class TestSub:

    @pytest.mark.parametrize(
        "start, kwargs, expect",
        [
            ((2025, 1, 1), {"years": 5}, (2020, 1, 1)),
            ((2025, 1, 1), {"months": 5}, (2024, 8, 1)),
            ((2025, 1, 1), {"days": 1}, (2024, 12, 31)),
            ((2025, 1, 1), {"hours": -12}, (2025, 1, 1, 12, 0, 0, 0)),
            ((2025, 1, 1, 12, 30), {"minutes": -40}, (2025, 1, 1, 13, 10)),
            ((2025, 1, 1, 12, 30), {"seconds": -180}, (2025, 1, 1, 12, 33)),
            (
                (2025, 1, 1, 12, 30),
                {"milliseconds": -300},
                (2025, 1, 1, 12, 30, 0, 300),
            ),
            (
                (2025, 1, 1, 12, 30),
                {"timestamp": MS_PER_HOUR},
                (2025, 1, 1, 11, 30),
            ),
            ((2025, 3, 31), {"months": 1}, (2025, 3, 3)),
        ],
    )
    @system_tz_ams()
    def test_fields(self, start, kwargs, expect):
        m = of(*start)
        assert m.sub(**kwargs) == of(*expect)
        assert m.sub(FieldDelta(**kwargs)) == of(*expect)

    def test_same_as_adding_negated(self):
        m = of(2024, 1, 31, 12)
        delta = FieldDelta(years=1, months=1, days=-3, hours=5, timestamp=7)
        assert m.sub(delta) == m.add(-delta)

    def test_invalid_moment(self):
        assert not nan().sub(days=1).is_valid()

    def test_invalid_args(self):
        with pytest.raises(TypeError, match="mix"):
            of().sub(FieldDelta(days=1), days=1)

    def test_as_function(self):
        m = of(2025, 1, 1)
        assert sub(m, days=1) == m.sub(days=1)


class TestFieldDelta:

    def test_defaults(self):
        d = FieldDelta()
        assert d.years == 0
        assert d.months == 0
        assert d.days == 0
        assert d.hours == 0
        assert d.minutes == 0
        assert d.seconds == 0
        assert d.milliseconds == 0
        assert d.timestamp == 0
        assert not d

    def test_fields(self):
        d = FieldDelta(years=1, timestamp=-3)
        assert d.years == 1
        assert d.timestamp == -3
        assert d

    def test_negate(self):
        d = FieldDelta(
            years=1,
            months=-2,
            days=3,
            hours=-4,
            minutes=5,
            seconds=-6,
            milliseconds=7,
            timestamp=-8,
        )
        assert -d == FieldDelta(
            years=-1,
            months=2,
            days=-3,
            hours=4,
            minutes=-5,
            seconds=6,
            milliseconds=-7,
            timestamp=8,
        )
        assert -(-d) == d
        assert +d is d

    def test_repr(self):
        assert repr(FieldDelta()) == "FieldDelta()"
        assert (
            repr(FieldDelta(timestamp=5, months=-1))
            == "FieldDelta(months=-1, timestamp=5)"
        )

    def test_equality(self):
        d = FieldDelta(days=1)
        assert d == FieldDelta(days=1)
        assert d != FieldDelta(days=2)
        assert d != FieldDelta(days=1, hours=1)
        assert hash(d) == hash(FieldDelta(days=1))
        assert d == AlwaysEqual()
        assert d != NeverEqual()
        assert d != 1

    def test_invalid(self):
        with pytest.raises(TypeError, match="hours"):
            FieldDelta(hours=1.5)  # type: ignore[arg-type]

        with pytest.raises(TypeError):
            FieldDelta(1)  # type: ignore[misc]

    def test_pickling(self):
        d = FieldDelta(years=1, timestamp=-8)
        assert pickle.loads(pickle.dumps(d)) == d


@system_tz_utc()
@given(TIMESTAMPS, integers(-100_000, 100_000), integers(-10**9, 10**9))
def test_time_fields_are_invertible(ts, hours, millis):
    m = of(ts)
    delta = FieldDelta(
        hours=hours,
        minutes=-hours,
        seconds=hours,
        milliseconds=millis,
        timestamp=-millis,
    )
    assert m.add(delta).sub(delta) == m


@given(
    integers(1900, 2100),
    integers(1, 12),
    integers(1, 28),
    integers(-1000, 1000),
)
def test_months_carry_into_years(year, month, day, months):
    m = of(year, month, day, 12)
    assert m.add(months=months + 12) == m.add(years=1).add(months=months)
    assert m.add(months=12 * months) == m.add(years=months)
