from pathlib import Path
from types import SimpleNamespace

from fontpeek.controller import AppController


class StaticSource:
    """Font source returning a fixed list of family names."""

    def __init__(self, families: list[str] | None = None):
        self.families = list(families or [])
        self.calls = 0

    def list_families(self) -> list[str]:
        self.calls += 1
        return list(self.families)


class FailingSource:
    def __init__(self, message: str = "font service crashed"):
        self.message = message

    def list_families(self) -> list[str]:
        raise OSError(self.message)


class ManualClock:
    """Time source for sched: sleeping advances the clock instantly."""

    def __init__(self):
        self.now = 0.0

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds


class FakeScheduler:
    """Manual clock: callbacks run only when :meth:`advance` passes their due time."""

    def __init__(self):
        self.now = 0
        self._pending: dict[int, tuple[int, int, object]] = {}
        self._next_handle = 0

    def call_later(self, delay_ms, callback):
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = (self.now + delay_ms, handle, callback)
        return handle

    def cancel(self, handle):
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = [item for item in self._pending.values() if item[0] <= target]
            if not due:
                break
            when, handle, callback = min(due, key=lambda item: (item[0], item[1]))
            del self._pending[handle]
            self.now = when
            callback()
        self.now = target


class RecordingClipboard:
    def __init__(self):
        self.texts: list[str] = []

    def write_text(self, text: str) -> None:
        self.texts.append(text)


class RecordingWindow:
    def __init__(self):
        self.calls: list[str] = []

    def minimize(self) -> None:
        self.calls.append("minimize")

    def close(self) -> None:
        self.calls.append("close")


class RecordingUpdater:
    def __init__(self):
        self.subscribers = []
        self.installs = 0

    def subscribe(self, callback) -> None:
        self.subscribers.append(callback)

    def install_now(self) -> None:
        self.installs += 1

    def emit(self, event) -> None:
        for callback in self.subscribers:
            callback(event)


def make_controller(
    families: list[str] | None = None,
    *,
    load: bool = True,
    source=None,
    **kwargs,
) -> tuple[AppController, FakeScheduler]:
    """Build a controller wired to test collaborators."""
    scheduler = FakeScheduler()
    kwargs.setdefault("clipboard", RecordingClipboard())
    kwargs.setdefault("window", RecordingWindow())
    kwargs.setdefault("updater", RecordingUpdater())
    controller = AppController(source or StaticSource(families), scheduler, **kwargs)
    if load:
        controller.load_fonts()
    return controller, scheduler


def make_fc_list_output(*lines: str, returncode: int = 0):
    """Object compatible with the result of run_command() for ``fc-list``."""
    return SimpleNamespace(stdout="\n".join(lines) + "\n", returncode=returncode)


def build_test_font(path: Path, family: str, style: str = "Regular") -> Path:
    """Write a minimal TrueType font whose name table reports ``family``."""
    from fontTools.fontBuilder import FontBuilder
    from fontTools.pens.ttGlyphPen import TTGlyphPen

    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((0, 500))
    pen.lineTo((500, 500))
    pen.lineTo((500, 0))
    pen.closePath()

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder([".notdef"])
    fb.setupCharacterMap({})
    fb.setupGlyf({".notdef": pen.glyph()})
    fb.setupHorizontalMetrics({".notdef": (500, 0)})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": style})
    fb.setupOS2()
    fb.setupPost()
    fb.save(str(path))
    return path
