"""
Fontpeek – update_status.py
==========================

Update status display: a small state machine rendering the transient
notification driven by the external updater.

States::

    idle (hidden) -> checking -> available | not-available | error
    available -> downloading -> downloaded | error

Transitions come only from updater events, delivered one at a time and
processed in order. ``downloaded`` waits for the user's install action, which
is delegated to the updater and does not change the local state.
``not-available`` and ``error`` fall back to ``idle`` after a dwell time
unless another event (or a dismissal) arrives first.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fontpeek.timers import Scheduler

STATUS_IDLE = "idle"
STATUS_CHECKING = "checking"
STATUS_AVAILABLE = "available"
STATUS_DOWNLOADING = "downloading"
STATUS_DOWNLOADED = "downloaded"
STATUS_NOT_AVAILABLE = "not-available"
STATUS_ERROR = "error"

UPDATE_STATUSES = (
    STATUS_CHECKING,
    STATUS_AVAILABLE,
    STATUS_DOWNLOADING,
    STATUS_DOWNLOADED,
    STATUS_NOT_AVAILABLE,
    STATUS_ERROR,
)

#: Dwell time (ms) before a transient status reverts to idle.
DWELL_MS: dict[str, int] = {
    STATUS_NOT_AVAILABLE: 3000,
    STATUS_ERROR: 5000,
}

#: status -> (icon, title)
STATUS_PRESENTATION: dict[str, tuple[str, str]] = {
    STATUS_CHECKING: ("sync", "Checking for updates..."),
    STATUS_AVAILABLE: ("download", "Update Available"),
    STATUS_DOWNLOADING: ("download", "Downloading Update"),
    STATUS_DOWNLOADED: ("check-circle", "Update Ready"),
    STATUS_NOT_AVAILABLE: ("check", "Up to Date"),
    STATUS_ERROR: ("warning", "Update Error"),
}

BYTE_UNITS = ("B", "KB", "MB", "GB")


class UpdateEventError(ValueError):
    """An updater payload could not be turned into an :class:`UpdateEvent`."""


def format_bytes(num_bytes: float) -> str:
    """Format a byte count with one decimal, scaling by powers of 1024.

    >>> format_bytes(1536)
    '1.5 KB'
    """
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.1f} {BYTE_UNITS[unit]}"


def clamp_percent(percent: float | None) -> float:
    if percent is None:
        return 0.0
    return max(0.0, min(100.0, float(percent)))


def _optional_number(data: dict[str, Any], *keys: str) -> float | None:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise UpdateEventError(f"'{key}' is not a number: {value!r}") from e
    return None


@dataclass(frozen=True)
class UpdateEvent:
    status: str
    message: str = ""
    version: str | None = None
    release_notes: str | None = None
    percent: float | None = None
    bytes_per_second: float | None = None
    transferred: float | None = None
    total: float | None = None

    def __post_init__(self) -> None:
        if self.status not in UPDATE_STATUSES:
            raise UpdateEventError(f"unknown update status '{self.status}'")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UpdateEvent:
        """Build an event from an updater payload.

        Both the updater's camelCase keys (``bytesPerSecond``,
        ``releaseNotes``) and snake_case keys are accepted.
        """
        if not isinstance(data, dict):
            raise UpdateEventError("update payload is not an object")

        status = data.get("status")
        if not isinstance(status, str):
            raise UpdateEventError("update payload has no 'status'")

        version = data.get("version")
        notes = data.get("releaseNotes", data.get("release_notes"))
        return cls(
            status=status,
            message=str(data.get("message") or ""),
            version=str(version) if version is not None else None,
            release_notes=str(notes) if notes is not None else None,
            percent=_optional_number(data, "percent"),
            bytes_per_second=_optional_number(
                data, "bytesPerSecond", "bytes_per_second"
            ),
            transferred=_optional_number(data, "transferred"),
            total=_optional_number(data, "total"),
        )


@dataclass(frozen=True)
class NotificationView:
    visible: bool
    status: str
    icon: str = ""
    title: str = ""
    message: str = ""
    progress_visible: bool = False
    percent: float = 0.0
    progress_text: str = ""
    speed_text: str = ""
    actions_visible: bool = False


HIDDEN_NOTIFICATION = NotificationView(visible=False, status=STATUS_IDLE)


class UpdateStatusDisplay:
    """State machine behind the update notification.

    Args:
        scheduler: schedules the dwell timers.
        install_callback: called on :meth:`install` ("install now").
        on_change: called with no arguments after every state change.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        install_callback: Callable[[], None] | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.install_callback = install_callback
        self.on_change = on_change
        self.state = STATUS_IDLE
        self.event: UpdateEvent | None = None
        self.update_info: UpdateEvent | None = None
        self._dwell_handle: Any = None

    @property
    def visible(self) -> bool:
        return self.state != STATUS_IDLE

    @property
    def install_enabled(self) -> bool:
        return self.state == STATUS_DOWNLOADED

    def handle(self, event: UpdateEvent) -> None:
        self._cancel_dwell()
        self.state = event.status
        self.event = event
        if event.status == STATUS_AVAILABLE:
            self.update_info = event

        dwell = DWELL_MS.get(event.status)
        if dwell is not None:
            self._dwell_handle = self.scheduler.call_later(dwell, self._dwell_elapsed)
        self._changed()

    def dismiss(self) -> None:
        """Hide the notification; a no-op when already idle."""
        if self.state == STATUS_IDLE:
            return
        self._cancel_dwell()
        self._set_idle()

    def install(self) -> bool:
        """Ask the updater to install a downloaded update.

        Only available in ``downloaded``. The local state does not change: the
        updater restarts the process.
        """
        if not self.install_enabled:
            return False
        if self.install_callback is not None:
            self.install_callback()
        return True

    def view(self) -> NotificationView:
        if self.state == STATUS_IDLE or self.event is None:
            return HIDDEN_NOTIFICATION

        event = self.event
        icon, title = STATUS_PRESENTATION[self.state]
        if self.state != STATUS_DOWNLOADING:
            return NotificationView(
                visible=True,
                status=self.state,
                icon=icon,
                title=title,
                message=event.message,
                actions_visible=self.state == STATUS_DOWNLOADED,
            )

        percent = clamp_percent(event.percent)
        speed_text = ""
        if event.bytes_per_second:
            speed_text = f"{format_bytes(event.bytes_per_second)}/s"
        return NotificationView(
            visible=True,
            status=self.state,
            icon=icon,
            title=title,
            message=event.message,
            progress_visible=True,
            percent=percent,
            progress_text=f"{percent:.0f}%",
            speed_text=speed_text,
        )

    def _dwell_elapsed(self) -> None:
        self._dwell_handle = None
        self._set_idle()

    def _cancel_dwell(self) -> None:
        if self._dwell_handle is not None:
            self.scheduler.cancel(self._dwell_handle)
            self._dwell_handle = None

    def _set_idle(self) -> None:
        self.state = STATUS_IDLE
        self._changed()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()
