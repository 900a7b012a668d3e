"""Pytest configuration and fixtures."""

import os
import sys
from unittest.mock import MagicMock

import pytest

# Mock pynput for headless testing
_pynput = MagicMock()
sys.modules["pynput"] = _pynput
sys.modules["pynput.keyboard"] = _pynput.keyboard
sys.modules["pynput.mouse"] = _pynput.mouse

os.environ.setdefault("SCENEPILOT_DISABLE_CONSOLE_LOGGING", "1")

from scenepilot.config import reset_settings  # noqa: E402
from scenepilot.hal.interfaces.actuation_port import IActuationPort  # noqa: E402
from scenepilot.model.geometry import Point, Rect, Rgb  # noqa: E402
from scenepilot.model.scene import Scene, TextAnchor, Transition  # noqa: E402
from scenepilot.perception.sample import PerceptionSample  # noqa: E402
from scenepilot.perception.screen import IPerception  # noqa: E402

# Every test scene is identified by its id appearing in this region
TITLE_RECT = Rect(0, 0, 200, 40)


class RecordingPort(IActuationPort):
    """Actuation port that records every call as a tuple."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.closed = False

    def heartbeat(self) -> None:
        self.calls.append(("heartbeat",))

    def switch_identity(self, index: int) -> None:
        self.calls.append(("switch_identity", index))

    def mouse_abs(self, x: int, y: int) -> None:
        self.calls.append(("mouse_abs", x, y))

    def mouse_move(self, dx: int, dy: int, wheel: int = 0) -> None:
        self.calls.append(("mouse_move", dx, dy, wheel))

    def mouse_down(self, left: bool, right: bool) -> None:
        self.calls.append(("mouse_down", left, right))

    def mouse_up(self) -> None:
        self.calls.append(("mouse_up",))

    def key_down(self, keycode: int, modifier: int = 0) -> None:
        self.calls.append(("key_down", keycode, modifier))

    def key_up(self) -> None:
        self.calls.append(("key_up",))

    def close(self) -> None:
        self.closed = True

    def named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


class FakeLink:
    """In-memory stand-in for an open serial port."""

    def __init__(self, error: Exception | None = None) -> None:
        self.written: list[bytes] = []
        self.flushes = 0
        self.closed = False
        self.error = error

    def write(self, data: bytes) -> int:
        if self.error is not None:
            raise self.error
        self.written.append(bytes(data))
        return len(data)

    def flush(self) -> None:
        self.flushes += 1

    def close(self) -> None:
        self.closed = True


class FakeSample(PerceptionSample):
    """Sample with canned OCR text per rect and colors per point."""

    def __init__(
        self,
        texts: dict[Rect, str] | None = None,
        colors: dict[Point, Rgb] | None = None,
    ) -> None:
        self.texts = texts or {}
        self.colors = colors or {}
        self.text_queries: list[Rect] = []
        self.color_queries: list[Point] = []

    def text_in(self, rect: Rect) -> str:
        self.text_queries.append(rect)
        return self.texts.get(rect, "")

    def color_at(self, point: Point) -> Rgb | None:
        self.color_queries.append(point)
        return self.colors.get(point)


class ScriptedPerception(IPerception):
    """Replays a fixed sequence of samples, then blank samples."""

    def __init__(self, samples: list[PerceptionSample]) -> None:
        self.samples = list(samples)
        self.taken = 0

    def sample(self) -> PerceptionSample:
        self.taken += 1
        if self.samples:
            return self.samples.pop(0)
        return FakeSample()


def title_scene(
    scene_id: str,
    transitions: tuple[Transition, ...] = (),
    handover: bool = False,
    handover_tag: str | None = None,
) -> Scene:
    """Scene recognized by its id in the title region."""
    return Scene(
        id=scene_id,
        display_name=scene_id.title(),
        anchors=(TextAnchor(TITLE_RECT, scene_id),),
        transitions=transitions,
        handover=handover,
        handover_tag=handover_tag,
    )


def showing(scene_id: str | None) -> FakeSample:
    """Sample in which ``scene_id`` is on screen (None for a blank screen)."""
    if scene_id is None:
        return FakeSample()
    return FakeSample(texts={TITLE_RECT: scene_id})


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep settings and env overrides from leaking between tests."""
    for key in list(os.environ):
        if key.startswith("SCENEPILOT_") and key != "SCENEPILOT_DISABLE_CONSOLE_LOGGING":
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def recording_port() -> RecordingPort:
    return RecordingPort()


@pytest.fixture
def fake_link() -> FakeLink:
    return FakeLink()


@pytest.fixture
def sleeps() -> list[float]:
    """List that collects every duration passed to ``sleep_recorder``."""
    return []


@pytest.fixture
def sleep_recorder(sleeps):
    """Sleep function that records durations instead of sleeping."""
    return sleeps.append


@pytest.fixture
def scene_factory():
    return title_scene


@pytest.fixture
def showing_factory():
    return showing


@pytest.fixture
def scripted_perception():
    """Factory: ``scripted_perception(["A", None, "B"])``.

    Entries may also be ready-made samples, which are replayed as given.
    """

    def _make(feed: list) -> ScriptedPerception:
        return ScriptedPerception(
            [item if isinstance(item, PerceptionSample) else showing(item) for item in feed]
        )

    return _make


@pytest.fixture
def fake_sample_cls():
    return FakeSample


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for test files."""
    return tmp_path
