"""Tests for NavigationEngine."""

import random
from unittest.mock import MagicMock, call

import pytest

from scenepilot.exceptions import ActuationError, SceneNotFoundError, ScreenCaptureError
from scenepilot.human.humanizer import MotionHumanizer
from scenepilot.model.catalog import loads_catalog
from scenepilot.model.geometry import Point, Rect, Rgb
from scenepilot.model.scene import Transition
from scenepilot.navigation.engine import NavigationEngine, NavOutcome, NavResult
from scenepilot.navigation.scene_graph import SceneGraph

END_TO_END_CATALOG = """
[[scenes]]
id = "A"
name = "Alpha"
logic = "and"

[scenes.anchors]
color = [ { pos = [10, 10], val = "#FF0000", tol = 5 } ]

[[scenes.transitions]]
target = "B"
coords = [20, 20]
post_delay = 500

[[scenes]]
id = "B"
name = "Beta"
logic = "and"

[scenes.anchors]
text = [ { rect = [0, 0, 200, 40], val = "已完成" } ]
"""


@pytest.fixture
def graph(scene_factory) -> SceneGraph:
    """menu -> lobby -> shop; lobby -> arena (handover 'td'); vault is a dead end."""
    return SceneGraph(
        [
            scene_factory("menu", (Transition("lobby", Point(960, 900), 1.5),)),
            scene_factory(
                "lobby",
                (
                    Transition("shop", Point(100, 100), 0.8),
                    Transition("arena", Point(500, 500), 0.5),
                ),
            ),
            scene_factory("shop", (Transition("lobby", Point(30, 30), 0.2),)),
            scene_factory("arena", handover_tag="td"),
            scene_factory("vault"),
        ]
    )


@pytest.fixture
def humanizer():
    return MagicMock(spec=MotionHumanizer)


def make_engine(graph, perception, humanizer, sleep, **kwargs) -> NavigationEngine:
    kwargs.setdefault("max_rounds", 15)
    return NavigationEngine(graph, perception, humanizer, idle_wait=0.5, sleep=sleep, **kwargs)


class TestNavigate:
    """Test the per-round state machine."""

    def test_already_at_target(self, graph, scripted_perception, humanizer, sleep_recorder, sleeps) -> None:
        engine = make_engine(graph, scripted_perception(["shop"]), humanizer, sleep_recorder)

        result = engine.navigate("shop")

        assert result == NavResult.success("shop", 1)
        humanizer.click_at.assert_not_called()
        assert sleeps == []

    def test_multi_hop_navigation(self, graph, scripted_perception, humanizer, sleep_recorder, sleeps) -> None:
        """Test each hop clicks the next transition and waits its settle delay."""
        perception = scripted_perception(["menu", "lobby", "shop"])
        engine = make_engine(graph, perception, humanizer, sleep_recorder, move_duration=0.3)

        result = engine.navigate("shop")

        assert result.outcome is NavOutcome.SUCCESS
        assert result.rounds == 3
        assert humanizer.click_at.call_args_list == [
            call(960, 900, duration=0.3),
            call(100, 100, duration=0.3),
        ]
        assert sleeps == [1.5, 0.8]

    def test_handover_carries_tag(self, graph, scripted_perception, humanizer, sleep_recorder) -> None:
        engine = make_engine(graph, scripted_perception(["lobby", "arena"]), humanizer, sleep_recorder)

        result = engine.navigate("arena")

        assert result.outcome is NavOutcome.HANDOVER
        assert result.scene_id == "arena"
        assert result.handler_tag == "td"
        assert result.arrived

    def test_blank_feed_fails_after_round_cap(self, graph, scripted_perception, humanizer, sleep_recorder, sleeps) -> None:
        """Test an unrecognized screen waits idle each round, then fails."""
        perception = scripted_perception([])
        engine = make_engine(graph, perception, humanizer, sleep_recorder, max_rounds=4)

        result = engine.navigate("lobby")

        assert result == NavResult.failed(4)
        assert not result.arrived
        assert perception.taken == 4
        assert sleeps == [0.5] * 4
        humanizer.click_at.assert_not_called()

    def test_dead_end_fails_immediately(self, graph, scripted_perception, humanizer, sleep_recorder) -> None:
        perception = scripted_perception(["vault", "vault"])
        engine = make_engine(graph, perception, humanizer, sleep_recorder)

        result = engine.navigate("lobby")

        assert result.outcome is NavOutcome.FAILED
        assert result.rounds == 1
        assert perception.taken == 1
        humanizer.click_at.assert_not_called()

    def test_unknown_target(self, graph, scripted_perception, humanizer, sleep_recorder) -> None:
        perception = scripted_perception(["menu"])
        engine = make_engine(graph, perception, humanizer, sleep_recorder)

        with pytest.raises(SceneNotFoundError):
            engine.navigate("nowhere")
        assert perception.taken == 0

    def test_actuation_error_counts_as_failed_round(
        self, graph, scripted_perception, humanizer, sleep_recorder, sleeps
    ) -> None:
        """Test a failed click is logged and the next round retries."""
        humanizer.click_at.side_effect = [ActuationError("write", "link lost"), None]
        perception = scripted_perception(["menu", "menu", "lobby"])
        engine = make_engine(graph, perception, humanizer, sleep_recorder)

        result = engine.navigate("lobby")

        assert result.outcome is NavOutcome.SUCCESS
        assert humanizer.click_at.call_count == 2
        assert sleeps == [0.5, 1.5]

    def test_capture_error_counts_as_unrecognized_round(
        self, graph, showing_factory, humanizer, sleep_recorder, sleeps
    ) -> None:
        """Test a failed grab waits idle and the next round samples again."""
        perception = MagicMock()
        perception.sample.side_effect = [
            ScreenCaptureError("grab failed", monitor=0),
            showing_factory("shop"),
        ]
        engine = make_engine(graph, perception, humanizer, sleep_recorder)

        result = engine.navigate("shop")

        assert result == NavResult.success("shop", 2)
        assert sleeps == [0.5]

    def test_persistent_actuation_error_hits_round_cap(
        self, graph, scripted_perception, humanizer, sleep_recorder
    ) -> None:
        humanizer.click_at.side_effect = ActuationError("write", "link lost")
        perception = scripted_perception(["menu"] * 5)
        engine = make_engine(graph, perception, humanizer, sleep_recorder, max_rounds=5)

        result = engine.navigate("lobby")

        assert result == NavResult.failed(5)
        assert humanizer.click_at.call_count == 5

    def test_slow_transition_is_not_clicked_twice(
        self, graph, scripted_perception, humanizer, sleep_recorder, sleeps
    ) -> None:
        """Test the source scene lingering for one round only waits."""
        perception = scripted_perception(["menu", "menu", "lobby"])
        engine = make_engine(graph, perception, humanizer, sleep_recorder)

        result = engine.navigate("lobby")

        assert result.outcome is NavOutcome.SUCCESS
        humanizer.click_at.assert_called_once_with(960, 900, duration=0.5)
        assert sleeps == [1.5, 0.5]

    def test_stuck_transition_is_retried(self, graph, scripted_perception, humanizer, sleep_recorder) -> None:
        perception = scripted_perception(["menu", "menu", "menu", "lobby"])
        engine = make_engine(graph, perception, humanizer, sleep_recorder)

        engine.navigate("lobby")

        assert humanizer.click_at.call_count == 2

    def test_confirm_rounds_zero_clicks_every_round(
        self, graph, scripted_perception, humanizer, sleep_recorder
    ) -> None:
        perception = scripted_perception(["menu", "menu", "lobby"])
        engine = make_engine(graph, perception, humanizer, sleep_recorder, confirm_rounds=0)

        engine.navigate("lobby")

        assert humanizer.click_at.call_count == 2

    def test_invalid_round_cap(self, graph, scripted_perception, humanizer, sleep_recorder) -> None:
        with pytest.raises(ValueError):
            make_engine(graph, scripted_perception([]), humanizer, sleep_recorder, max_rounds=0)


class TestEndToEnd:
    """Drive a real humanizer over a recording port."""

    def test_one_click_then_success(
        self, fake_sample_cls, scripted_perception, recording_port, sleep_recorder, sleeps
    ) -> None:
        """Test feed [A, A, B] yields one click at (20, 20), a 500 ms wait, then success."""
        graph = loads_catalog(END_TO_END_CATALOG)
        human_sleeps: list[float] = []
        human = MotionHumanizer(
            recording_port, 1920, 1080, sleep=human_sleeps.append, rng=random.Random(1)
        )
        red = fake_sample_cls(colors={Point(10, 10): Rgb(250, 3, 2)})
        done = fake_sample_cls(texts={Rect(0, 0, 200, 40): "已 完 成"})
        perception = scripted_perception([red, red, done])
        engine = NavigationEngine(graph, perception, human, idle_wait=0.5, sleep=sleep_recorder)

        result = engine.navigate("B")

        assert result == NavResult.success("B", 3)
        assert recording_port.named("mouse_down") == [("mouse_down", True, False)]
        assert len(recording_port.named("mouse_up")) == 1
        assert human.cursor.to_tuple() == (20, 20)
        assert sleeps == [0.5, 0.5]


class TestHelpers:
    """Test one-shot helpers used by task modules."""

    def test_current_scene(self, graph, scripted_perception, humanizer, sleep_recorder) -> None:
        engine = make_engine(graph, scripted_perception(["shop", None]), humanizer, sleep_recorder)

        assert engine.current_scene().id == "shop"
        assert engine.current_scene() is None

    def test_ocr_area(self, graph, humanizer, sleep_recorder) -> None:
        rect = Rect(10, 10, 50, 50)
        perception = MagicMock()
        perception.ocr_area.return_value = "领取"
        engine = make_engine(graph, perception, humanizer, sleep_recorder)

        assert engine.ocr_area(rect) == "领取"
        perception.ocr_area.assert_called_once_with(rect)
