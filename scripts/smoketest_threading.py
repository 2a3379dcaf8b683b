"""
Stress tests for thread-safety of moments shared between threads,
and of re-reading the system timezone while they're in use.

Note this isn't a unit test, because it changes the process-wide timezone
"""

import sys
import time
from os import environ
from threading import Thread

from chronext import Moment, reset_system_tz

if not hasattr(sys, "_is_gil_enabled") or sys._is_gil_enabled():
    # Running with GIL enabled can still be useful to compare performance,
    # but be sure to warn that threading hasn't been stress tested.
    print("WARNING: Running with GIL enabled. Threading not stress tested.")


SHARED = Moment.of(2024, 6, 15, 12, 0)
NUM_THREADS = 16
NUM_ITERATIONS = 500
TIMEZONE_SAMPLE = [
    "UTC0",
    "CET-1CEST,M3.5.0,M10.5.0/3",
    "EST5EDT,M3.2.0,M11.1.0",
    "NST3:30NDT,M3.2.0,M11.1.0",
    "IST-5:30",
    "AEST-10AEDT,M10.1.0,M4.1.0/3",
    "<-03>3",
]
assert (
    len(TIMEZONE_SAMPLE) % NUM_THREADS
), "Timezone sample should not be evenly divisible by number of threads"
TZS = TIMEZONE_SAMPLE * (NUM_THREADS * NUM_ITERATIONS)


def use_shared_moment(tzs):
    """Derive new moments from a shared one, checking it never changes"""
    expect = SHARED.timestamp()
    for _ in tzs:
        m = SHARED.add(months=1, hours=-3).sub(months=1)
        assert m.diff(SHARED) == -3 * 3_600_000
        SHARED.format("%Y-%m-%d %H:%M:%S %z")
        assert SHARED.timestamp() == expect


def set_system_tz(tzs):
    """Create moments while the system timezone keeps changing"""
    for tz in tzs:
        environ["TZ"] = tz
        reset_system_tz()
        m = Moment.of(2024, 6, 15, 12, 0)
        del m


def main(func):
    print(f"Starting test: {func.__name__}")
    threads = []

    start_time = time.time()

    for n in range(NUM_THREADS):
        thread = Thread(target=func, args=(TZS[n::NUM_THREADS],))
        threads.append(thread)
        thread.start()

    for thread in threads:
        thread.join()

    end_time = time.time()
    print(f"Execution time: {end_time - start_time:.2f} seconds")


if __name__ == "__main__":
    main(use_shared_moment)
    main(set_system_tz)
