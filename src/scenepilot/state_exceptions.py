"""Scene and navigation exceptions."""

from .base_exceptions import ScenePilotException


class StateException(ScenePilotException):
    """Base exception for scene-related errors."""

    pass


class SceneNotFoundError(StateException):
    """Raised when a scene id is not present in the catalog."""

    def __init__(self, scene_id: str, **kwargs) -> None:
        """Initialize with scene id."""
        super().__init__(
            f"Scene '{scene_id}' not found",
            error_code="SCENE_NOT_FOUND",
            context={"scene_id": scene_id, **kwargs},
        )
