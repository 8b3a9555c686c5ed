"""Compile orchestrator: walks documents, builds timelines, applies effects, composites."""

import logging
import math
import random
from decimal import ROUND_HALF_UP, Decimal

from storyboard.compositor import composite_scenes
from storyboard.config import Config
from storyboard.effects.shape_effects import transform_shapes
from storyboard.models import (
    Animation,
    AnimationDocument,
    PathSegment,
    Scene,
    SceneGraph,
    Shape,
    Vector2,
)
from storyboard.text_timeline import build_text_timeline
from storyboard.timeline import build_shape_timelines, concealed
from storyboard.walker import SceneSource, walk_document

logger = logging.getLogger(__name__)


class CompileResult:
    """Summary of a compiled animation."""

    def __init__(self, animation: Animation, scene_count: int) -> None:
        self.scene_count = scene_count
        self.shape_count = len(animation.shapes)
        self.keyframe_count = sum(len(s.keyframes) for s in animation.shapes)
        self.text_frame_count = len(animation.text)
        self.total_frames = max(
            (k.offset for s in animation.shapes for k in s.keyframes), default=0,
        )

    def __repr__(self) -> str:
        return (
            f"CompileResult({self.scene_count} scenes, {self.total_frames} frames: "
            f"{self.shape_count} shapes with {self.keyframe_count} keyframes, "
            f"{self.text_frame_count} text frames)"
        )


def random_sequence(seed: int = 0) -> random.Random:
    """Random source for jitter effects; reseed it with .seed() between batched compiles."""
    return random.Random(seed)


def compile_scene(source: SceneSource, rng: random.Random) -> Scene:
    shapes = build_shape_timelines(source)
    shapes = transform_shapes(shapes, source.effect_groups, source.duration, rng)
    return Scene(
        id=source.id,
        duration=source.duration,
        shapes=[concealed(shape) for shape in shapes],
    )


def compile_animation(
    graphs: SceneGraph | list[SceneGraph],
    document: AnimationDocument | None = None,
    config: Config | None = None,
    rng: random.Random | None = None,
) -> Animation:
    """Compile scene graphs and declared text frames into the Animation IR.

    Scenes of several graphs are concatenated in the order given. Unless an
    rng is passed in, a fresh one seeded from config.seed is used, so each
    call is reproducible on its own. Text frames consume randomness before
    shapes do.
    """
    config = config or Config()
    document = document or AnimationDocument()
    if rng is None:
        rng = random_sequence(config.seed)
    if isinstance(graphs, SceneGraph):
        graphs = [graphs]

    text = build_text_timeline(document.text, rng, config.text)

    scenes: list[Scene] = []
    for graph in graphs:
        for source in walk_document(graph):
            scenes.append(compile_scene(source, rng))

    animation = Animation(shapes=composite_scenes(scenes), text=text)
    if config.max_decimal_places is not None:
        animation = round_animation(animation, config.max_decimal_places)

    logger.info("Compiled %s", CompileResult(animation, len(scenes)))
    return animation


# --- Rounding ---


def round_animation(animation: Animation, max_decimal_places: int) -> Animation:
    """Round every path coordinate to at most max_decimal_places decimals."""
    return animation.model_copy(update={
        "shapes": [_round_shape(shape, max_decimal_places) for shape in animation.shapes],
    })


def round_number(value: float, max_decimal_places: int) -> float:
    """Round half away from zero on the exact binary value, like Number.toFixed."""
    if not math.isfinite(value):
        return value
    exponent = Decimal(1).scaleb(-max_decimal_places)
    rounded = Decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)
    return float(rounded)


def _round_shape(shape: Shape, places: int) -> Shape:
    keyframes = [
        keyframe.patched(path=_round_path(keyframe.properties.path, places))
        if keyframe.properties.path is not None else keyframe
        for keyframe in shape.keyframes
    ]
    return shape.model_copy(update={"path": _round_path(shape.path, places), "keyframes": keyframes})


def _round_path(path: list[PathSegment], places: int) -> list[PathSegment]:
    return [
        PathSegment(
            point=_round_vector(s.point, places),
            handle_in=_round_vector(s.handle_in, places),
            handle_out=_round_vector(s.handle_out, places),
        )
        for s in path
    ]


def _round_vector(vector: Vector2, places: int) -> Vector2:
    return Vector2(x=round_number(vector.x, places), y=round_number(vector.y, places))
