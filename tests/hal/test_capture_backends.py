"""Tests for the MSS capture and EasyOCR backends with their libraries stubbed."""

from unittest.mock import MagicMock

import pytest
from PIL import Image

from scenepilot.exceptions import ScreenCaptureError
from scenepilot.hal.implementations import easyocr_engine, mss_capture
from scenepilot.hal.implementations.easyocr_engine import EasyOCREngine
from scenepilot.hal.implementations.mss_capture import MSSScreenCapture


class FakeShot:
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        # Blue-green-red-padding, one orange pixel everywhere
        self.bgra = bytes([0, 128, 255, 0]) * (width * height)


@pytest.fixture
def fake_sct(monkeypatch):
    sct = MagicMock()
    sct.monitors = [
        {"left": 0, "top": 0, "width": 7, "height": 2},
        {"left": 0, "top": 0, "width": 4, "height": 2},
        {"left": 4, "top": 0, "width": 3, "height": 2},
    ]
    sct.grab.side_effect = lambda mon: FakeShot(mon["width"], mon["height"])
    monkeypatch.setattr(mss_capture.mss, "mss", lambda: sct)
    return sct


class TestMSSScreenCapture:
    """Test capture conversion and monitor selection."""

    def test_capture_default_monitor(self, fake_sct) -> None:
        image = MSSScreenCapture().capture_screen()

        assert image.mode == "RGB"
        assert image.size == (4, 2)
        assert image.getpixel((0, 0)) == (255, 128, 0)

    def test_capture_second_monitor(self, fake_sct) -> None:
        image = MSSScreenCapture().capture_screen(1)
        assert image.size == (3, 2)
        fake_sct.grab.assert_called_once_with(fake_sct.monitors[2])

    def test_invalid_monitor(self, fake_sct) -> None:
        with pytest.raises(ScreenCaptureError) as exc_info:
            MSSScreenCapture().capture_screen(5)
        assert exc_info.value.error_code == "CAPTURE_FAILED"

    def test_screen_size(self, fake_sct) -> None:
        assert MSSScreenCapture(default_monitor=1).get_screen_size() == (3, 2)

    def test_close(self, fake_sct) -> None:
        capture = MSSScreenCapture()
        capture.capture_screen()
        capture.close()
        fake_sct.close.assert_called_once()


class TestEasyOCREngine:
    """Test text extraction with the reader replaced."""

    def test_fragments_joined_with_spaces(self) -> None:
        engine = EasyOCREngine(languages=["ch_sim", "en"])
        engine._reader = MagicMock()
        engine._reader.readtext.return_value = ["开始", "游戏"]

        assert engine.extract_text(Image.new("L", (8, 8))) == "开始 游戏"

        array = engine._reader.readtext.call_args.args[0]
        assert array.shape == (8, 8, 3)
        assert engine._reader.readtext.call_args.kwargs == {"detail": 0}

    def test_nothing_recognized(self) -> None:
        engine = EasyOCREngine()
        engine._reader = MagicMock()
        engine._reader.readtext.return_value = []

        assert engine.extract_text(Image.new("RGB", (8, 8))) == ""

    def test_reader_created_lazily(self, monkeypatch) -> None:
        factory = MagicMock()
        monkeypatch.setattr(easyocr_engine.easyocr, "Reader", factory)

        engine = EasyOCREngine(languages=["en"])
        factory.assert_not_called()

        assert engine.reader is factory.return_value
        assert engine.reader is factory.return_value
        factory.assert_called_once_with(["en"], gpu=False, verbose=False)
