from __future__ import annotations

from ._pymoment import *
from ._pymoment import (  # for the docs
    __all__,
    __version__,
    _patch_time_frozen,
    _patch_time_keep_ticking,
    _unpatch_time,
    _unpkl_fdelta,
    _unpkl_fset,
    _unpkl_moment,
)

import time as _time
from contextlib import contextmanager as _contextmanager
from dataclasses import dataclass as _dataclass
from typing import Iterator as _Iterator

__all__ = [*__all__, "patch_current_time", "reset_system_tz"]


@_dataclass
class _TimePatch:
    _pin: Moment
    _keep_ticking: bool

    def shift(self, *args, **kwargs):
        """Move the patched time, taking the same arguments as
        :meth:`Moment.add`"""
        if self._keep_ticking:
            self._pin = new = Moment.of().add(*args, **kwargs)
            _unpatch_time()
            _patch_time_keep_ticking(new.timestamp())
        else:
            self._pin = new = self._pin.add(*args, **kwargs)
            _patch_time_frozen(new.timestamp())


@_contextmanager
def patch_current_time(
    moment: Moment, /, *, keep_ticking: bool
) -> _Iterator[_TimePatch]:
    """Patch the current time to a fixed value (for testing purposes).
    Behaves as a context manager or decorator, with similar semantics to
    ``unittest.mock.patch``.

    Important
    ---------

    * This function should be used only for testing purposes. It is not
      thread-safe or part of the stable API.
    * This function only affects what ``chronext`` considers the current time
      (i.e. ``of()`` and ``Moment.now()``). It does not affect the standard
      library's time functions or any other libraries.
      Use the ``time_machine`` package if you also want to patch other libraries.
    * It doesn't affect the system timezone.
      If you need to patch the system timezone, set the ``TZ`` environment
      variable and call :func:`reset_system_tz`.

    Example
    -------

    >>> from chronext import Moment, patch_current_time
    >>> m = Moment.of("1980-03-02T02:00Z")
    >>> with patch_current_time(m, keep_ticking=False) as p:
    ...     assert Moment.of() == m
    ...     p.shift(hours=4)
    ...     assert Moment.of() == m.add(hours=4)
    ...
    >>> assert Moment.of() != m
    """
    if not moment.is_valid():
        raise ValueError("Cannot patch the current time to an invalid Moment")
    if keep_ticking:
        _patch_time_keep_ticking(moment.timestamp())
    else:
        _patch_time_frozen(moment.timestamp())

    try:
        yield _TimePatch(moment, keep_ticking)
    finally:
        _unpatch_time()


def reset_system_tz() -> None:
    """Re-read the system timezone, e.g. after changing the ``TZ``
    environment variable. Moments created afterwards use the new timezone
    for their calendar fields.

    Note
    ----
    This has no effect on platforms where the timezone can't be reset at
    runtime (i.e. Windows), and doesn't affect existing moments.
    """
    try:
        tzset = _time.tzset
    except AttributeError:  # pragma: no cover
        return
    tzset()
