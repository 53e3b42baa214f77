"""
Fontpeek – timers.py
===================

Single-threaded timer scheduling.

Dwell timers (transient notifications, clipboard acknowledgment) are the only
cancellable operations in Fontpeek. They run on whatever event loop drives the
application, behind the small :class:`Scheduler` protocol:

- ``TkScheduler``: the Tk event loop (``after`` / ``after_cancel``)
- ``SchedScheduler``: the standard ``sched`` module, for headless runs
"""

from __future__ import annotations

import sched
import time
from collections.abc import Callable
from typing import Any, Protocol


class Scheduler(Protocol):
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


class TkScheduler:
    """Schedule callbacks on a Tk widget's event loop."""

    def __init__(self, widget: Any) -> None:
        self.widget = widget

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        return self.widget.after(int(delay_ms), callback)

    def cancel(self, handle: Any) -> None:
        self.widget.after_cancel(handle)


class SchedScheduler:
    """Headless scheduler on top of :class:`sched.scheduler`.

    Call :meth:`run` to process events until none are pending.
    """

    def __init__(
        self,
        timefunc: Callable[[], float] = time.monotonic,
        delayfunc: Callable[[float], object] = time.sleep,
    ) -> None:
        self._sched = sched.scheduler(timefunc, delayfunc)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        return self._sched.enter(delay_ms / 1000.0, 0, callback)

    def cancel(self, handle: Any) -> None:
        try:
            self._sched.cancel(handle)
        except ValueError:
            # already fired
            pass

    def empty(self) -> bool:
        return self._sched.empty()

    def run(self) -> None:
        self._sched.run()
