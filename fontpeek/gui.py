"""
Fontpeek – gui.py
================

Tk desktop window.

The window is a thin view: every user input is translated to a binding-table
event and dispatched to :class:`~fontpeek.controller.AppController`; every
controller notification re-renders the affected panel. Window and clipboard
collaborators are implemented on the Tk root.
"""

from __future__ import annotations

import sys
import threading
import tkinter as tk
from collections.abc import Callable
from tkinter import ttk
from typing import Any

from fontpeek.bindings import dispatch
from fontpeek.catalog import SourceUnavailable
from fontpeek.controller import AppController
from fontpeek.font_source import FontSource
from fontpeek.preview import (
    DEFAULT_FONT_SIZE,
    FALLBACK_FAMILY,
    FONT_SIZE_STEP,
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
)
from fontpeek.timers import TkScheduler
from fontpeek.updater import ReplayUpdater, Updater

WINDOW_SIZE = "800x600"
LIST_PANEL_WIDTH = 260

#: Tk event sequence -> binding-table chord
TK_KEY_CHORDS: dict[str, str] = {
    "<Control-f>": "Ctrl+F",
    "<Control-F>": "Ctrl+F",
    "<Control-equal>": "Ctrl+=",
    "<Control-plus>": "Ctrl+=",
    "<Control-minus>": "Ctrl+-",
}
if sys.platform == "darwin":
    TK_KEY_CHORDS.update(
        {
            "<Command-f>": "Meta+F",
            "<Command-equal>": "Meta+=",
            "<Command-minus>": "Meta+-",
        }
    )

NOTIFICATION_ICONS = {
    "sync": "⟳",
    "download": "⬇",
    "check-circle": "✔",
    "check": "✓",
    "warning": "⚠",
}

#: bindtag placed first on input widgets so shortcuts beat their class bindings
KEY_BINDTAG = "FontpeekKeys"


def install_key_chords(
    root: Any, widgets: list[Any], on_chord: Callable[[str], str | None]
) -> None:
    """Route the shortcut chords to ``on_chord``.

    Tk runs bindings tag by tag (widget, class, toplevel, ``all``). Input
    widgets get :data:`KEY_BINDTAG` in front of their own tags, so the handler
    runs before the Entry/Text class defaults and its ``"break"`` suppresses
    them. Every other widget reaches the toplevel binding.
    """
    for sequence, chord in TK_KEY_CHORDS.items():

        def handler(_event: Any, chord: str = chord) -> str | None:
            return on_chord(chord)

        root.bind_class(KEY_BINDTAG, sequence, handler)
        root.bind(sequence, handler)

    for widget in widgets:
        widget.bindtags((KEY_BINDTAG,) + tuple(widget.bindtags()))


def load_fonts_in_background(
    controller: AppController, post: Callable[[Callable[[], object]], None]
) -> threading.Thread:
    """Query the font source on a worker thread.

    The result is handed to ``post``, which must run the callback on the UI
    thread; only that callback touches the controller state.
    """

    def work() -> None:
        try:
            names = controller.fetch_fonts()
        except SourceUnavailable as e:
            post(lambda error=e: controller.apply_fonts(error=error))
            return
        post(lambda: controller.apply_fonts(names))

    thread = threading.Thread(target=work, daemon=True)
    thread.start()
    return thread


class TkClipboard:
    def __init__(self, root: tk.Tk) -> None:
        self.root = root

    def write_text(self, text: str) -> None:
        self.root.clipboard_clear()
        self.root.clipboard_append(text)


class TkWindow:
    def __init__(self, root: tk.Tk) -> None:
        self.root = root

    def minimize(self) -> None:
        self.root.iconify()

    def close(self) -> None:
        self.root.destroy()


class FontpeekApp(tk.Tk):
    def __init__(
        self,
        source: FontSource,
        updater: Updater | None = None,
        font_size: int = DEFAULT_FONT_SIZE,
        verbose: bool = False,
    ) -> None:
        super().__init__()
        self.title("Fontpeek")
        self.geometry(WINDOW_SIZE)
        self.minsize(800, 600)

        self.scheduler = TkScheduler(self)
        self.controller = AppController(
            source,
            self.scheduler,
            updater=updater,
            clipboard=TkClipboard(self),
            window=TkWindow(self),
            font_size=font_size,
            verbose=verbose,
        )
        self._rows: list[str] = []
        self._preview_family: str | None = None

        self._build_top_bar()
        self._build_main_layout()
        self._build_notification()
        self._bind_keys()

        self.controller.subscribe(self._on_state_change)
        load_fonts_in_background(self.controller, self._post)
        if isinstance(updater, ReplayUpdater):
            updater.start(self.scheduler)

    # ------------------------------
    # Layout
    # ------------------------------

    def _build_top_bar(self) -> None:
        bar = ttk.Frame(self, padding=(8, 4))
        bar.pack(side=tk.TOP, fill=tk.X)
        ttk.Label(bar, text="Fontpeek").pack(side=tk.LEFT)
        ttk.Button(bar, text="✕", width=3, command=lambda: self._fire("click:close")).pack(
            side=tk.RIGHT
        )
        ttk.Button(
            bar, text="—", width=3, command=lambda: self._fire("click:minimize")
        ).pack(side=tk.RIGHT)

    def _build_main_layout(self) -> None:
        paned = self.paned = ttk.PanedWindow(self, orient=tk.HORIZONTAL)
        paned.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        left = ttk.Frame(paned, padding=6, width=LIST_PANEL_WIDTH)
        right = ttk.Frame(paned, padding=6)
        paned.add(left, weight=0)
        paned.add(right, weight=1)

        # --- list panel
        self.search_var = tk.StringVar()
        self.search_entry = ttk.Entry(left, textvariable=self.search_var)
        self.search_entry.pack(fill=tk.X)
        self.search_var.trace_add(
            "write", lambda *_: self._fire("input:search", self.search_var.get())
        )

        self.count_label = ttk.Label(left, text="Loading fonts...")
        self.count_label.pack(fill=tk.X, pady=(4, 2))

        self.font_list = tk.Listbox(left, activestyle="none", exportselection=False)
        self.font_list.pack(fill=tk.BOTH, expand=True)
        self.font_list.bind("<<ListboxSelect>>", self._on_list_select)

        # --- font info + size
        info = ttk.Frame(right)
        info.pack(fill=tk.X)
        self.family_label = ttk.Label(info, text="")
        self.family_label.pack(side=tk.LEFT)
        self.copy_button = ttk.Button(
            info, text="Copy", command=lambda: self._fire("click:copy-font-name")
        )
        self.size_var = tk.StringVar(value=str(self.controller.font_size))
        self.size_spin = ttk.Spinbox(
            info,
            from_=MIN_FONT_SIZE,
            to=MAX_FONT_SIZE,
            increment=FONT_SIZE_STEP,
            width=4,
            textvariable=self.size_var,
            command=lambda: self._fire("input:font-size", self.size_var.get()),
        )
        self.size_spin.pack(side=tk.RIGHT)
        self.size_spin.bind(
            "<Return>", lambda _e: self._fire("input:font-size", self.size_var.get())
        )

        self.preview_text = tk.Text(right, wrap=tk.NONE, undo=True, relief=tk.FLAT)
        self.preview_text.pack(fill=tk.BOTH, expand=True, pady=(6, 0))

    def _build_notification(self) -> None:
        self.notification = ttk.Frame(self, padding=8, relief=tk.RIDGE)
        head = ttk.Frame(self.notification)
        head.pack(fill=tk.X)
        self.update_icon = ttk.Label(head, text="")
        self.update_icon.pack(side=tk.LEFT)
        self.update_title = ttk.Label(head, text="")
        self.update_title.pack(side=tk.LEFT, padx=6)
        ttk.Button(
            head, text="✕", width=3, command=lambda: self._fire("click:close-notification")
        ).pack(side=tk.RIGHT)

        self.update_message = ttk.Label(self.notification, text="")
        self.update_message.pack(fill=tk.X)

        self.progress = ttk.Frame(self.notification)
        self.progress_bar = ttk.Progressbar(self.progress, maximum=100)
        self.progress_bar.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.progress_text = ttk.Label(self.progress, text="")
        self.progress_text.pack(side=tk.LEFT, padx=4)
        self.progress_speed = ttk.Label(self.progress, text="")
        self.progress_speed.pack(side=tk.LEFT)

        self.actions = ttk.Frame(self.notification)
        ttk.Button(
            self.actions, text="Install now", command=lambda: self._fire("click:install-update")
        ).pack(side=tk.LEFT)
        ttk.Button(
            self.actions, text="Later", command=lambda: self._fire("click:dismiss-update")
        ).pack(side=tk.LEFT, padx=4)

    def _bind_keys(self) -> None:
        install_key_chords(
            self,
            [self.search_entry, self.size_spin, self.font_list, self.preview_text],
            self._on_key,
        )

    # ------------------------------
    # Input
    # ------------------------------

    def _post(self, callback: Callable[[], object]) -> None:
        """Run ``callback`` on the Tk thread; callable from worker threads."""
        try:
            self.after(0, callback)
        except (RuntimeError, tk.TclError) as e:
            # window closed or main loop gone
            print(f"⚠️  Warning: dropped a background result: {e}")

    def _fire(self, event: str, payload: object = None) -> None:
        dispatch(self.controller, event, payload)

    def _on_key(self, chord: str) -> str | None:
        binding = dispatch(self.controller, f"key:{chord}")
        if binding is not None and binding.prevent_default:
            return "break"
        return None

    def _on_list_select(self, _event: tk.Event) -> None:
        picked = self.font_list.curselection()
        if picked:
            self._fire("click:font-item", self._rows[picked[0]])

    # ------------------------------
    # Rendering
    # ------------------------------

    def _on_state_change(self, topic: str) -> None:
        if topic == "fonts":
            self._render_list()
        elif topic == "selection":
            self._render_list()
            self._render_font_info()
        elif topic == "preview":
            self._render_preview()
        elif topic == "update":
            self._render_notification()
        elif topic == "copy":
            acknowledged = self.controller.state.copy_acknowledged
            self.copy_button.configure(text="Copied ✓" if acknowledged else "Copy")
        elif topic == "focus-search":
            self.search_entry.focus_set()
            self.search_entry.select_range(0, tk.END)

    def _render_list(self) -> None:
        view = self.controller.list_view()
        self.font_list.delete(0, tk.END)
        self._rows = [row.family for row in view.rows]

        if view.error_message or view.empty_message:
            self.count_label.configure(text=view.error_message or view.empty_message)
            return

        self.count_label.configure(text=f"{view.count} fonts")
        for idx, row in enumerate(view.rows):
            self.font_list.insert(tk.END, row.family)
            if row.selected:
                self.font_list.selection_set(idx)
                self.font_list.see(idx)

    def _render_font_info(self) -> None:
        family = self.controller.font_info()
        if family is None:
            self.family_label.configure(text="")
            self.copy_button.pack_forget()
            return
        self.family_label.configure(text=family)
        self.copy_button.pack(side=tk.LEFT, padx=6)

    def _render_preview(self) -> None:
        preview = self.controller.preview()
        self.size_var.set(str(self.controller.font_size))
        if preview is None:
            return
        # negative size: pixels, like the HTML specimen
        try:
            self.preview_text.configure(font=(preview.family, -preview.font_size))
        except tk.TclError:
            self.preview_text.configure(font=(FALLBACK_FAMILY, -preview.font_size))
        # user edits survive size changes, not a new selection
        if self._preview_family != preview.family:
            self.preview_text.delete("1.0", tk.END)
            self.preview_text.insert("1.0", preview.text)
        self._preview_family = preview.family

    def _render_notification(self) -> None:
        view = self.controller.state.updates.view()
        if not view.visible:
            self.notification.pack_forget()
            return

        self.update_icon.configure(text=NOTIFICATION_ICONS.get(view.icon, ""))
        self.update_title.configure(text=view.title)
        self.update_message.configure(text=view.message)

        if view.progress_visible:
            self.progress_bar.configure(value=view.percent)
            self.progress_text.configure(text=view.progress_text)
            self.progress_speed.configure(text=view.speed_text)
            self.progress.pack(fill=tk.X, pady=(4, 0))
        else:
            self.progress.pack_forget()

        if view.actions_visible:
            self.actions.pack(fill=tk.X, pady=(4, 0))
        else:
            self.actions.pack_forget()

        self.notification.pack(side=tk.BOTTOM, fill=tk.X, before=self.paned)


def run_gui(
    source: FontSource,
    updater: Updater | None = None,
    font_size: int = DEFAULT_FONT_SIZE,
    verbose: bool = False,
) -> None:
    app = FontpeekApp(source, updater=updater, font_size=font_size, verbose=verbose)
    app.mainloop()
