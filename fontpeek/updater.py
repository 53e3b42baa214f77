"""
Fontpeek – updater.py
====================

Updater collaborators.

Fontpeek does not download or install anything itself. An updater emits
lifecycle events (see :mod:`fontpeek.update_status`) to its subscribers and
accepts a single "install now" command.

``ReplayUpdater`` replays a JSON event script, which is handy for exercising
the notification without a release server. Expected structure::

    {
      "events": [
        {"delay_ms": 0, "status": "checking", "message": "..."},
        {"delay_ms": 800, "status": "downloading", "percent": 40,
         "bytesPerSecond": 1536},
        ...
      ]
    }

A bare list of events is accepted too. ``delay_ms`` is relative to the
previous event.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from fontpeek.timers import Scheduler
from fontpeek.update_status import UpdateEvent, UpdateEventError

UpdateCallback = Callable[[UpdateEvent], None]


class Updater(Protocol):
    def subscribe(self, callback: UpdateCallback) -> None: ...

    def install_now(self) -> None: ...


class NullUpdater:
    """Updater that never emits events."""

    def subscribe(self, callback: UpdateCallback) -> None:
        pass

    def install_now(self) -> None:
        print("⚠️  Warning: no updater configured; nothing to install")


def parse_update_script(data: Any) -> list[tuple[int, UpdateEvent]]:
    """Parse a replay script into ``(delay_ms, event)`` pairs.

    Invalid entries are reported and skipped.
    """
    if isinstance(data, dict):
        entries = data.get("events")
    else:
        entries = data

    if not isinstance(entries, list):
        raise UpdateEventError("update script must contain a list of events")

    script: list[tuple[int, UpdateEvent]] = []
    for idx, entry in enumerate(entries):
        try:
            event = UpdateEvent.from_dict(entry)
            delay = int(entry.get("delay_ms", 0))
        except (UpdateEventError, TypeError, ValueError) as e:
            print(f"⚠️  Warning: skipping update event #{idx}: {e}")
            continue
        script.append((max(0, delay), event))
    return script


def load_update_script(path: Path) -> list[tuple[int, UpdateEvent]]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_update_script(data)


class ReplayUpdater:
    """Replay a scripted sequence of update events through a scheduler."""

    def __init__(self, script: list[tuple[int, UpdateEvent]]) -> None:
        self.script = list(script)
        self.install_requested = False
        self._subscribers: list[UpdateCallback] = []

    @classmethod
    def from_file(cls, path: Path) -> ReplayUpdater:
        return cls(load_update_script(path))

    def subscribe(self, callback: UpdateCallback) -> None:
        self._subscribers.append(callback)

    def start(self, scheduler: Scheduler) -> None:
        """Schedule every scripted event; delays accumulate."""
        at = 0
        for delay, event in self.script:
            at += delay
            scheduler.call_later(at, lambda event=event: self._emit(event))

    def install_now(self) -> None:
        self.install_requested = True
        print("✓ Install requested; the update is applied on restart.")

    def _emit(self, event: UpdateEvent) -> None:
        for callback in list(self._subscribers):
            callback(event)
