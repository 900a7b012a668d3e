"""Evaluation of scene evidence against a perception sample."""

from collections.abc import Iterable

from ..model.scene import Anchor, ColorAnchor, Scene, TextAnchor
from ..perception.sample import PerceptionSample


def anchor_holds(anchor: Anchor, sample: PerceptionSample) -> bool:
    """Evaluate one anchor.

    Args:
        anchor: Text or color anchor
        sample: Frame to probe

    Returns:
        True if the anchor's evidence is present
    """
    if isinstance(anchor, TextAnchor):
        return anchor.matches(sample.text_in(anchor.rect))
    if isinstance(anchor, ColorAnchor):
        return anchor.matches(sample.color_at(anchor.point))
    raise TypeError(f"Unsupported anchor type: {type(anchor).__name__}")


def scene_active(scene: Scene, sample: PerceptionSample) -> bool:
    """Check whether ``scene`` is on screen in ``sample``.

    Color anchors are probed before text anchors; evaluation stops as
    soon as the outcome is decided.

    Args:
        scene: Scene to test
        sample: Frame to probe

    Returns:
        True if the scene's combinator is satisfied
    """
    ordered = scene.color_anchors + scene.text_anchors
    return scene.combinator.combine(anchor_holds(anchor, sample) for anchor in ordered)


def identify_scene(scenes: Iterable[Scene], sample: PerceptionSample) -> Scene | None:
    """Find the first active scene in catalog order.

    Args:
        scenes: Scenes in catalog order
        sample: Frame to probe

    Returns:
        First matching scene, or None if the screen is unrecognized
    """
    for scene in scenes:
        if scene_active(scene, sample):
            return scene
    return None
