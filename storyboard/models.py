"""Pydantic models for the storyboard compiler."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class EffectKind(str, Enum):
    ANIMATE_IN = "animatein"
    ANIMATE_OUT = "animateout"
    FADE_IN = "fadein"
    FADE_OUT = "fadeout"
    PULSE = "pulse"
    POP = "pop"
    JITTER = "jitter"
    EXPLODE = "explode"


class TextEffectKind(str, Enum):
    FADE_IN = "fadein"
    FADE_OUT = "fadeout"
    ANIMATE_IN = "animatein"
    ANIMATE_OUT = "animateout"
    TYPEWRITER = "typewriter"
    CURSOR = "cursor"
    PREPEND = "prepend"
    JITTER = "jitter"


class _CamelModel(BaseModel):
    """Accepts both snake_case names and the camelCase aliases used by players."""
    model_config = ConfigDict(populate_by_name=True)


# --- Geometry ---


class Vector2(BaseModel):
    x: float = 0.0
    y: float = 0.0


class PathSegment(_CamelModel):
    point: Vector2
    handle_in: Vector2 = Field(default_factory=Vector2, alias="handleIn")
    handle_out: Vector2 = Field(default_factory=Vector2, alias="handleOut")


class Bounds(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def center(self) -> Vector2:
        return Vector2(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def union(self, other: "Bounds") -> "Bounds":
        left = min(self.x, other.x)
        top = min(self.y, other.y)
        right = max(self.x + self.width, other.x + other.width)
        bottom = max(self.y + self.height, other.y + other.height)
        return Bounds(x=left, y=top, width=right - left, height=bottom - top)

    def translated(self, offset: Vector2) -> "Bounds":
        return self.model_copy(update={"x": self.x + offset.x, "y": self.y + offset.y})


# --- Scene graph (what the markup parser hands us) ---


class PathNode(_CamelModel):
    """A leaf of the scene graph: one drawable path."""
    type: Literal["path"] = "path"
    name: str = ""
    fill_color: str | None = Field(None, alias="fillColor")
    stroke_color: str | None = Field(None, alias="strokeColor")
    stroke_width: float | None = Field(None, alias="strokeWidth")
    closed: bool = True
    bounds: Bounds = Field(default_factory=Bounds)
    segments: list[PathSegment] = Field(default_factory=list)


class GroupNode(BaseModel):
    type: Literal["group"] = "group"
    name: str = ""
    children: list["Node"] = Field(default_factory=list)

    @property
    def bounds(self) -> Bounds:
        """Union of all descendant path bounds."""
        result: Bounds | None = None
        stack: list[Node] = list(self.children)
        while stack:
            node = stack.pop()
            if isinstance(node, GroupNode):
                stack.extend(node.children)
                continue
            result = node.bounds if result is None else result.union(node.bounds)
        return result or Bounds()


Node = Annotated[Union[GroupNode, PathNode], Field(discriminator="type")]
GroupNode.model_rebuild()


class SceneGraph(BaseModel):
    """Document root; its direct children are the stages."""
    children: list[Node] = Field(default_factory=list)


# --- Shape timeline ---


class ShapeProperties(_CamelModel):
    """Partial property patch; None means carried forward from the previous keyframe."""
    fill_color: str | None = Field(None, alias="fillColor")
    stroke_color: str | None = Field(None, alias="strokeColor")
    stroke_width: float | None = Field(None, alias="strokeWidth")
    path: list[PathSegment] | None = None


class ShapeKeyframe(BaseModel):
    offset: int
    properties: ShapeProperties

    def at(self, offset: int) -> "ShapeKeyframe":
        return self.model_copy(update={"offset": offset})

    def patched(self, **changes: Any) -> "ShapeKeyframe":
        return self.model_copy(update={"properties": self.properties.model_copy(update=changes)})


class Shape(_CamelModel):
    id: str
    fill_color: str | None = Field(None, alias="fillColor")
    stroke_color: str | None = Field(None, alias="strokeColor")
    stroke_width: float | None = Field(None, alias="strokeWidth")
    broken: bool = False
    path: list[PathSegment] = Field(default_factory=list)
    keyframes: list[ShapeKeyframe] = Field(default_factory=list)

    @property
    def base_properties(self) -> ShapeProperties:
        return ShapeProperties(
            fill_color=self.fill_color,
            stroke_color=self.stroke_color,
            stroke_width=self.stroke_width,
            path=self.path,
        )


class KeyframeDef(BaseModel):
    """A keyframe leaf as discovered in the document, before normalization."""
    target: str
    offset: int
    properties: ShapeProperties


class Effect(BaseModel):
    kind: EffectKind
    offset: int = 0
    duration: int | None = None
    bounds: Bounds = Field(default_factory=Bounds)


class EffectGroupDef(BaseModel):
    id: str
    targets: list[str]
    effects: list[Effect]


class Scene(BaseModel):
    id: str
    duration: int = 1
    shapes: list[Shape] = Field(default_factory=list)


# --- Text timeline ---


class TextEffectOptions(_CamelModel):
    offset: Vector2 | None = None
    cursor: str | None = None
    blink_duration: int | None = Field(None, alias="blinkDuration")
    text: str | None = None
    amount: float = 0.0
    increasing: bool = False


class TextEffectDef(_CamelModel):
    kind: str = Field(alias="name")
    offset: int | None = None
    duration: int | None = None
    options: TextEffectOptions = Field(default_factory=TextEffectOptions)


class TextFrame(BaseModel):
    time: int
    text: str = ""
    style: dict[str, str] = Field(default_factory=dict)
    position: Vector2 | None = None


class TextFrameDef(BaseModel):
    """A text frame as declared in the animation document."""
    time: int = 0
    duration: int | None = None
    text: str = ""
    style: dict[str, str] = Field(default_factory=dict)
    position: Vector2 | None = None
    effects: list[TextEffectDef] = Field(default_factory=list)


class AnimationDocument(BaseModel):
    text: list[TextFrameDef] = Field(default_factory=list)


# --- Output IR ---


class Animation(BaseModel):
    shapes: list[Shape] = Field(default_factory=list)
    text: list[TextFrame] = Field(default_factory=list)

    def to_ir(self) -> dict[str, Any]:
        """Plain dict with the camelCase field names players expect."""
        return self.model_dump(by_alias=True, mode="json")
