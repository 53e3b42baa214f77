"""
Fontpeek – cli.py
================

Command line entry point.

Without options the Tk window is opened. The headless modes work on the same
controller:

- ``--list``: print the (filtered) font families
- ``--export FAMILY``: write an HTML specimen page for ``FAMILY``
- ``--no-gui --update-events FILE``: replay an updater script and print every
  notification state

The CLI is intentionally thin: orchestration only, no business logic.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from fontpeek.controller import AppController
from fontpeek.font_source import SOURCE_CHOICES, make_font_source
from fontpeek.preview import DEFAULT_FONT_SIZE
from fontpeek.specimen import write_specimen
from fontpeek.timers import SchedScheduler
from fontpeek.update_status import NotificationView, UpdateEventError
from fontpeek.updater import ReplayUpdater


def describe_notification(view: NotificationView) -> str:
    """One-line, human-readable summary of the notification state."""
    if not view.visible:
        return "[idle] notification hidden"
    line = f"[{view.status}] {view.title}"
    if view.message:
        line += f" - {view.message}"
    if view.progress_visible:
        line += f" ({view.progress_text}"
        if view.speed_text:
            line += f", {view.speed_text}"
        line += ")"
    if view.actions_visible:
        line += " [install available]"
    return line


def limit_items(items: list, number: int | None) -> list:
    """Keep the first N items (positive) or the last |N| items (negative)."""
    if not number:
        return items
    if number > 0:
        return items[:number]
    return items[number:]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse installed fonts and preview them.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--source",
        choices=SOURCE_CHOICES,
        default="auto",
        help="Font discovery backend ('auto' picks one for this platform)",
    )
    parser.add_argument(
        "--font-dir",
        type=Path,
        action="append",
        metavar="DIR",
        help="Font directory to scan (implies the directory source, repeatable)",
    )
    parser.add_argument(
        "-q",
        "--query",
        default="",
        help="Initial search query (case-insensitive substring)",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=DEFAULT_FONT_SIZE,
        help="Initial preview font size in pixels (clamped to 8-72)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the matching font families and exit",
    )
    parser.add_argument(
        "-n",
        "--number",
        type=int,
        help="With --list, print only the first N (if positive) or the last |N| (if negative) families",
    )
    parser.add_argument(
        "--export",
        metavar="FAMILY",
        help="Write an HTML specimen page for FAMILY and exit",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output file for --export (default: unique fontpeek_<system>_<date>_NNN.html)",
    )
    parser.add_argument(
        "--update-events",
        type=Path,
        metavar="FILE",
        help="JSON script of updater events to replay",
    )
    parser.add_argument(
        "--no-gui",
        action="store_true",
        help="Do not open the window (replays --update-events on the console)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging to stdout",
    )
    return parser


def run_headless(args: argparse.Namespace, controller: AppController) -> None:
    print("[1/3] Loading installed fonts...")
    if not controller.load_fonts():
        print("✗ No fonts to show or system error.", file=sys.stderr)
        sys.exit(1)

    fonts = controller.set_query(args.query)
    if args.query:
        print(f"✓ {len(fonts)} fonts match '{args.query}'")
    else:
        print(f"✓ {len(fonts)} fonts")

    if args.list:
        print("[2/3] Font families:")
        shown = limit_items(fonts, args.number)
        if not shown:
            print("  (none)")
        for font in shown:
            print(f"  - {font.family}")

    if args.export:
        print(f"[2/3] Rendering specimen for '{args.export}'...")
        if not controller.select(args.export):
            print(f"❌ Error: font family not installed: {args.export}", file=sys.stderr)
            sys.exit(1)
        path = write_specimen(controller, args.output)
        print(f"✓ Specimen written to {path}")

    print("[3/3] Done.")


def replay_updates(
    controller: AppController, updater: ReplayUpdater, scheduler: SchedScheduler
) -> None:
    print(f"Replaying {len(updater.script)} update events...")

    def on_change(topic: str) -> None:
        if topic == "update":
            print(describe_notification(controller.state.updates.view()))

    controller.subscribe(on_change)
    updater.start(scheduler)
    scheduler.run()
    if controller.update_ready:
        print("✓ Update downloaded; run without --no-gui to install it from the window.")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    source = make_font_source(args.source, args.font_dir, verbose=args.verbose)

    updater: ReplayUpdater | None = None
    if args.update_events:
        if not args.update_events.exists():
            print(f"❌ Error: update script not found: {args.update_events}", file=sys.stderr)
            sys.exit(1)
        try:
            updater = ReplayUpdater.from_file(args.update_events)
        except (json.JSONDecodeError, UpdateEventError) as e:
            print(f"❌ Error: invalid update script {args.update_events}: {e}", file=sys.stderr)
            sys.exit(1)

    if args.list or args.export or args.no_gui:
        scheduler = SchedScheduler()
        controller = AppController(
            source,
            scheduler,
            updater=updater,
            font_size=args.size,
            verbose=args.verbose,
        )
        if args.list or args.export or updater is None:
            run_headless(args, controller)
        if updater is not None:
            replay_updates(controller, updater, scheduler)
        return

    # Deferred: tkinter is only needed for the window
    from fontpeek.gui import run_gui

    run_gui(source, updater=updater, font_size=args.size, verbose=args.verbose)


if __name__ == "__main__":
    main()
