import os
from contextlib import contextmanager
from unittest.mock import patch

from chronext import reset_system_tz

# POSIX TZ strings, so the tests don't depend on the timezone database
# being installed.
AMS_TZ_POSIX = "CET-1CEST,M3.5.0,M10.5.0/3"
NYC_TZ_POSIX = "EST5EDT,M3.2.0,M11.1.0"
# Half-hour offsets, on both sides of Greenwich
NEWFOUNDLAND_TZ_POSIX = "NST3:30NDT,M3.2.0,M11.1.0"
INDIA_TZ_POSIX = "IST-5:30"
UTC_TZ_POSIX = "UTC0"


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


class AlwaysLarger:
    def __lt__(self, _):
        return False

    def __le__(self, _):
        return False

    def __gt__(self, _):
        return True

    def __ge__(self, _):
        return True


class AlwaysSmaller:
    def __lt__(self, _):
        return True

    def __le__(self, _):
        return True

    def __gt__(self, _):
        return False

    def __ge__(self, _):
        return False


@contextmanager
def system_tz(name):
    try:
        with patch.dict(os.environ, {"TZ": name}):
            reset_system_tz()
            yield
    finally:
        reset_system_tz()  # don't forget to reset the timezone after the patch!


@contextmanager
def system_tz_ams():
    with system_tz(AMS_TZ_POSIX):
        yield


@contextmanager
def system_tz_nyc():
    with system_tz(NYC_TZ_POSIX):
        yield


@contextmanager
def system_tz_utc():
    with system_tz(UTC_TZ_POSIX):
        yield
