"""
Fontpeek – bindings.py
=====================

Declarative input wiring: ``{event, condition} -> action``.

Every entry names a UI event, an optional condition evaluated against the
controller, and the controller method to run. Views translate their native
events into these names and call :func:`dispatch`; tests call it directly.

Event names:

- ``key:<chord>``: keyboard chords such as ``Ctrl+F`` (``Meta`` is the
  macOS command key)
- ``click:<control>``: buttons and list items
- ``input:<control>``: text and spinbox input, the payload is the new value
- ``update:status``: updater lifecycle events, the payload is the event
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fontpeek.controller import AppController


def has_selection(controller: AppController) -> bool:
    return controller.selected is not None


def update_ready(controller: AppController) -> bool:
    return controller.update_ready


@dataclass(frozen=True)
class Binding:
    event: str
    action: str
    condition: Callable[[AppController], bool] | None = None
    passes_payload: bool = False
    prevent_default: bool = False


BINDINGS: tuple[Binding, ...] = (
    # Keyboard shortcuts always swallow the platform default
    Binding("key:Ctrl+F", "focus_search", prevent_default=True),
    Binding("key:Meta+F", "focus_search", prevent_default=True),
    Binding("key:Ctrl+=", "increase_font_size", prevent_default=True),
    Binding("key:Meta+=", "increase_font_size", prevent_default=True),
    Binding("key:Ctrl+-", "decrease_font_size", prevent_default=True),
    Binding("key:Meta+-", "decrease_font_size", prevent_default=True),
    # List and font info
    Binding("click:font-item", "select", passes_payload=True),
    Binding("click:copy-font-name", "copy_family_name", condition=has_selection),
    Binding("input:search", "set_query", passes_payload=True),
    Binding("input:font-size", "set_font_size", passes_payload=True),
    # Window chrome
    Binding("click:minimize", "minimize_window"),
    Binding("click:close", "close_window"),
    # Update notification
    Binding("click:install-update", "install_update", condition=update_ready),
    Binding("click:dismiss-update", "dismiss_update"),
    Binding("click:close-notification", "dismiss_update"),
    Binding("update:status", "on_update_event", passes_payload=True),
)


def bindings_for(event: str) -> list[Binding]:
    return [b for b in BINDINGS if b.event == event]


def dispatch(controller: AppController, event: str, payload: Any = None) -> Binding | None:
    """Run the actions bound to ``event``.

    Bindings whose condition is false are skipped, but they still count as
    matched so that keyboard defaults are suppressed consistently.

    Returns:
        The first binding matching ``event``, or ``None`` when nothing is bound.
    """
    matched = bindings_for(event)
    for binding in matched:
        if binding.condition is not None and not binding.condition(controller):
            continue
        action = getattr(controller, binding.action)
        if binding.passes_payload:
            action(payload)
        else:
            action()
    return matched[0] if matched else None
