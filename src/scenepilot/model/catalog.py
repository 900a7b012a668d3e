"""Scene catalog schema and loader.

The catalog is a TOML document holding an ordered ``[[scenes]]`` array.
Parsing is strict: unknown keys, missing required keys, malformed colors,
degenerate rectangles, duplicate ids and transitions to undeclared scenes
all fail the load with CatalogLoadError. A half-loaded catalog is never
returned.

Example:
    >>> graph = load_catalog("ui_map.toml")
    >>> graph.get("lobby").display_name
    'Lobby'
"""

import tomllib
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..config_exceptions import CatalogLoadError
from ..logging import get_logger
from ..navigation.scene_graph import SceneGraph
from .geometry import Point, Rect, Rgb
from .scene import ColorAnchor, Combinator, Scene, TextAnchor, Transition

logger = get_logger(__name__)

HEX_COLOR_PATTERN = r"^#?[0-9A-Fa-f]{6}$"

Coordinate = Annotated[int, Field(ge=0)]


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class TextAnchorEntry(_StrictModel):
    """``{ rect = [x1, y1, x2, y2], val = "..." }``"""

    rect: tuple[Coordinate, Coordinate, Coordinate, Coordinate]
    val: str = Field(min_length=1)

    @field_validator("rect")
    @classmethod
    def _check_rect(cls, value: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
        x1, y1, x2, y2 = value
        if x2 <= x1 or y2 <= y1:
            raise ValueError(f"rect must have x2 > x1 and y2 > y1, got {list(value)}")
        return value

    @field_validator("val")
    @classmethod
    def _check_val(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("val must contain non-whitespace text")
        return value


class ColorAnchorEntry(_StrictModel):
    """``{ pos = [x, y], val = "#RRGGBB", tol = 0-255 }``"""

    pos: tuple[Coordinate, Coordinate]
    val: str = Field(pattern=HEX_COLOR_PATTERN)
    tol: int = Field(ge=0, le=255)


class AnchorsEntry(_StrictModel):
    text: list[TextAnchorEntry] = Field(default_factory=list)
    color: list[ColorAnchorEntry] = Field(default_factory=list)


class TransitionEntry(_StrictModel):
    target: str = Field(min_length=1)
    coords: tuple[Coordinate, Coordinate]
    post_delay: int = Field(0, ge=0, description="Settle delay in milliseconds")


class SceneEntry(_StrictModel):
    id: str = Field(min_length=1)
    name: str = Field(validation_alias=AliasChoices("name", "display_name"))
    logic: Literal["and", "or"]
    handler: str | None = Field(None, min_length=1)
    handover: bool = False
    anchors: AnchorsEntry = Field(default_factory=AnchorsEntry)
    transitions: list[TransitionEntry] = Field(default_factory=list)

    @field_validator("logic", mode="before")
    @classmethod
    def _normalize_logic(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class CatalogDocument(_StrictModel):
    scenes: list[SceneEntry] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_references(self) -> "CatalogDocument":
        seen: set[str] = set()
        for scene in self.scenes:
            if scene.id in seen:
                raise ValueError(f"duplicate scene id '{scene.id}'")
            seen.add(scene.id)

        for scene in self.scenes:
            for transition in scene.transitions:
                if transition.target not in seen:
                    raise ValueError(
                        f"scene '{scene.id}' has a transition to unknown scene "
                        f"'{transition.target}'"
                    )
        return self


def _build_scene(entry: SceneEntry) -> Scene:
    anchors: list[TextAnchor | ColorAnchor] = [
        TextAnchor(rect=Rect(*text.rect), expected=text.val) for text in entry.anchors.text
    ]
    anchors.extend(
        ColorAnchor(point=Point(*color.pos), expected=Rgb.from_hex(color.val), tolerance=color.tol)
        for color in entry.anchors.color
    )
    transitions = tuple(
        Transition(
            target=t.target,
            click_point=Point(*t.coords),
            settle_delay=t.post_delay / 1000.0,
        )
        for t in entry.transitions
    )
    return Scene(
        id=entry.id,
        display_name=entry.name,
        combinator=Combinator(entry.logic),
        anchors=tuple(anchors),
        transitions=transitions,
        handover=entry.handover,
        handover_tag=entry.handler,
    )


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def parse_catalog(data: dict[str, Any], source: str = "<memory>") -> SceneGraph:
    """Validate a decoded catalog document and build the scene graph.

    Args:
        data: Decoded TOML document
        source: Name used in error messages

    Returns:
        Immutable SceneGraph in catalog order

    Raises:
        CatalogLoadError: If the document fails validation
    """
    try:
        document = CatalogDocument.model_validate(data)
    except ValidationError as e:
        raise CatalogLoadError(source, _format_validation_error(e)) from e

    graph = SceneGraph(_build_scene(entry) for entry in document.scenes)
    logger.info("catalog_loaded", source=source, scenes=len(graph))
    return graph


def loads_catalog(text: str, source: str = "<memory>") -> SceneGraph:
    """Parse catalog TOML text.

    Args:
        text: TOML document
        source: Name used in error messages

    Returns:
        SceneGraph

    Raises:
        CatalogLoadError: If the text is not valid TOML or fails validation
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise CatalogLoadError(source, f"invalid TOML: {e}") from e
    return parse_catalog(data, source)


def load_catalog(path: str | Path) -> SceneGraph:
    """Load the scene catalog from a TOML file.

    Args:
        path: Catalog file path

    Returns:
        SceneGraph

    Raises:
        CatalogLoadError: If the file cannot be read or is invalid
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogLoadError(str(path), f"cannot read file: {e}") from e
    return loads_catalog(text, str(path))
