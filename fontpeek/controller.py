"""
Fontpeek – controller.py
=======================

Application state and the controller that owns it.

All user-facing operations go through :class:`AppController`. The controller
never touches a rendering surface: views subscribe to it and re-render when
notified with a topic string.

Topics: ``fonts``, ``selection``, ``preview``, ``update``, ``copy``,
``focus-search``, ``window``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from fontpeek.catalog import (
    CatalogStore,
    FontEntry,
    SelectionModel,
    SourceUnavailable,
    fetch_families,
)
from fontpeek.font_source import FontSource
from fontpeek.preview import DEFAULT_FONT_SIZE, PreviewConfig, PreviewOutput, render_preview
from fontpeek.timers import Scheduler
from fontpeek.update_status import UpdateEvent, UpdateEventError, UpdateStatusDisplay
from fontpeek.updater import NullUpdater, Updater

# --- Configuration ---
COPY_ACK_MS = 1000
EMPTY_LIST_MESSAGE = "No fonts found"


class Clipboard(Protocol):
    def write_text(self, text: str) -> None: ...


class WindowControl(Protocol):
    def minimize(self) -> None: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class FontRow:
    family: str
    selected: bool


@dataclass(frozen=True)
class ListView:
    count: int
    rows: list[FontRow]
    empty_message: str | None = None
    error_message: str | None = None


@dataclass
class AppState:
    store: CatalogStore
    selection: SelectionModel
    preview: PreviewConfig
    updates: UpdateStatusDisplay
    load_error: str | None = None
    copy_acknowledged: bool = False
    listeners: list[Callable[[str], None]] = field(default_factory=list)


class AppController:
    def __init__(
        self,
        source: FontSource,
        scheduler: Scheduler,
        updater: Updater | None = None,
        clipboard: Clipboard | None = None,
        window: WindowControl | None = None,
        font_size: int = DEFAULT_FONT_SIZE,
        verbose: bool = False,
    ) -> None:
        self.source = source
        self.scheduler = scheduler
        self.updater = updater or NullUpdater()
        self.clipboard = clipboard
        self.window = window
        self.verbose = verbose

        store = CatalogStore()
        self.state = AppState(
            store=store,
            selection=SelectionModel(store),
            preview=PreviewConfig(font_size=font_size),
            updates=UpdateStatusDisplay(
                scheduler,
                install_callback=self.updater.install_now,
                on_change=lambda: self._notify("update"),
            ),
        )
        self._copy_handle: Any = None
        self.updater.subscribe(self.on_update_event)

    # ------------------------------
    # Listeners
    # ------------------------------

    def subscribe(self, listener: Callable[[str], None]) -> None:
        self.state.listeners.append(listener)

    def _notify(self, topic: str) -> None:
        for listener in list(self.state.listeners):
            listener(topic)

    # ------------------------------
    # Catalog, filter and selection
    # ------------------------------

    def load_fonts(self) -> bool:
        """Load the catalog; a failing source becomes an inline error."""
        if self.state.store.loaded:
            print("⚠️  Warning: font catalog is already loaded")
            return False
        try:
            names = self.fetch_fonts()
        except SourceUnavailable as e:
            return self.apply_fonts(error=e)
        return self.apply_fonts(names)

    def fetch_fonts(self) -> list[str]:
        """Query the font source without touching the state.

        Safe to call from a worker thread; hand the result to
        :meth:`apply_fonts` on the UI thread.

        Raises:
            SourceUnavailable: the source call raised.
        """
        return fetch_families(self.source)

    def apply_fonts(
        self, names: list[str] | None = None, error: Exception | None = None
    ) -> bool:
        """Install fetched family names, or show ``error`` inline."""
        if self.state.store.loaded:
            print("⚠️  Warning: font catalog is already loaded")
            return False

        if error is not None:
            self.state.load_error = f"Failed to load fonts: {error}"
            print(f"❌ {self.state.load_error}")
            self._notify("fonts")
            return False

        fonts = self.state.store.set_catalog(names or [])
        self.state.load_error = None
        if self.verbose:
            print(f"✓ Loaded {len(fonts)} fonts")
        self._notify("fonts")
        return True

    def set_query(self, query: str) -> list[FontEntry]:
        filtered = self.state.store.set_query(query)
        self._notify("fonts")
        return filtered

    def select(self, family: str) -> bool:
        if not self.state.selection.select(family):
            return False
        self._notify("selection")
        self._notify("preview")
        return True

    @property
    def selected(self) -> FontEntry | None:
        return self.state.selection.current

    def font_info(self) -> str | None:
        """Family name shown in the font-info panel, if any."""
        return self.selected.family if self.selected else None

    def list_view(self) -> ListView:
        store = self.state.store
        rows = [
            FontRow(font.family, self.state.selection.current is font)
            for font in store.filtered
        ]
        if self.state.load_error:
            return ListView(count=0, rows=[], error_message=self.state.load_error)
        if not rows:
            return ListView(count=0, rows=[], empty_message=EMPTY_LIST_MESSAGE)
        return ListView(count=len(rows), rows=rows)

    # ------------------------------
    # Preview
    # ------------------------------

    def preview(self) -> PreviewOutput | None:
        return render_preview(self.selected, self.state.preview)

    @property
    def font_size(self) -> int:
        return self.state.preview.font_size

    def set_font_size(self, value: int | str) -> int:
        """Set the preview size from user input; unparsable input is ignored."""
        try:
            size = int(value)
        except (TypeError, ValueError):
            return self.state.preview.font_size
        self.state.preview.set_font_size(size)
        self._notify("preview")
        return self.state.preview.font_size

    def increase_font_size(self) -> int:
        self.state.preview.increase()
        self._notify("preview")
        return self.state.preview.font_size

    def decrease_font_size(self) -> int:
        self.state.preview.decrease()
        self._notify("preview")
        return self.state.preview.font_size

    # ------------------------------
    # Clipboard and window
    # ------------------------------

    def copy_family_name(self) -> bool:
        """Copy the selected family; the acknowledgment reverts after 1 s."""
        if self.selected is None or self.clipboard is None:
            return False
        try:
            self.clipboard.write_text(self.selected.family)
        except Exception as e:
            print(f"⚠️  Warning: could not copy to the clipboard: {e}")
            return False

        if self._copy_handle is not None:
            self.scheduler.cancel(self._copy_handle)
        self.state.copy_acknowledged = True
        self._copy_handle = self.scheduler.call_later(COPY_ACK_MS, self._copy_ack_elapsed)
        self._notify("copy")
        return True

    def _copy_ack_elapsed(self) -> None:
        self._copy_handle = None
        self.state.copy_acknowledged = False
        self._notify("copy")

    def focus_search(self) -> None:
        self._notify("focus-search")

    def minimize_window(self) -> None:
        if self.window is None:
            return
        try:
            self.window.minimize()
        except Exception as e:
            print(f"⚠️  Warning: could not minimize the window: {e}")
            return
        self._notify("window")

    def close_window(self) -> None:
        if self.window is None:
            return
        try:
            self.window.close()
        except Exception as e:
            print(f"⚠️  Warning: could not close the window: {e}")

    # ------------------------------
    # Updates
    # ------------------------------

    def on_update_event(self, event: UpdateEvent | dict[str, Any]) -> bool:
        """Feed an updater event (or raw payload) to the notification."""
        if not isinstance(event, UpdateEvent):
            try:
                event = UpdateEvent.from_dict(event)
            except UpdateEventError as e:
                print(f"⚠️  Warning: ignoring update event: {e}")
                return False
        self.state.updates.handle(event)
        return True

    def install_update(self) -> bool:
        try:
            return self.state.updates.install()
        except Exception as e:
            print(f"⚠️  Warning: could not install the update: {e}")
            return False

    def dismiss_update(self) -> None:
        self.state.updates.dismiss()

    @property
    def update_ready(self) -> bool:
        return self.state.updates.install_enabled
