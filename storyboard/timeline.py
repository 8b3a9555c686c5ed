"""Assemble per-shape keyframe timelines for a scene."""

import logging
from collections import defaultdict

from storyboard.colors import TRANSPARENT
from storyboard.errors import UnknownTargetError
from storyboard.keyframes import hidden, insert_keyframe, normalize_offset, value_at_offset
from storyboard.models import Shape, ShapeKeyframe
from storyboard.walker import SceneSource

logger = logging.getLogger(__name__)


def build_shape_timelines(source: SceneSource) -> list[Shape]:
    """Attach sorted, gap-free keyframes to every shape of the scene.

    Keyframe defs are taken in declared-offset order, so when two defs land on
    the same normalized offset the later one wins.
    """
    shape_ids = {shape.id for shape in source.shapes}
    keyframes_by_shape: dict[str, list[ShapeKeyframe]] = defaultdict(list)
    for definition in sorted(source.keyframes, key=lambda k: k.offset):
        if definition.target not in shape_ids:
            raise UnknownTargetError(definition.target)
        keyframes_by_shape[definition.target].append(ShapeKeyframe(
            offset=normalize_offset(definition.offset, source.duration),
            properties=definition.properties,
        ))

    return [
        build_shape_timeline(shape, keyframes_by_shape.get(shape.id, []), source.duration)
        for shape in source.shapes
    ]


def build_shape_timeline(
    shape: Shape,
    keyframes: list[ShapeKeyframe],
    duration: int,
) -> Shape:
    """Sort keyframes, add the initial keyframe if missing and the terminal one.

    Keyframes outside [0, duration] are dropped: nothing is drawn past the
    terminal keyframe.
    """
    ordered: list[ShapeKeyframe] = []
    for keyframe in sorted(keyframes, key=lambda k: k.offset):
        if not 0 <= keyframe.offset <= duration:
            logger.warning(
                "Dropping keyframe %s:%d outside scene of %d frames", shape.id, keyframe.offset, duration,
            )
            continue
        ordered = insert_keyframe(ordered, keyframe)

    if not any(k.offset == 0 for k in ordered):
        ordered = insert_keyframe(ordered, initial_keyframe(shape))

    ordered = insert_keyframe(ordered, terminal_keyframe(ordered, duration))
    logger.debug("Shape %s: %d keyframes", shape.id, len(ordered))
    return shape.model_copy(update={"keyframes": ordered})


def initial_keyframe(shape: Shape) -> ShapeKeyframe:
    return ShapeKeyframe(offset=0, properties=shape.base_properties)


def terminal_keyframe(keyframes: list[ShapeKeyframe], duration: int) -> ShapeKeyframe:
    """State at the scene end with colours cleared so nothing draws past it."""
    return hidden(value_at_offset(keyframes, duration))


def concealed(shape: Shape) -> Shape:
    """Clear the shape-level colours; visibility then comes only from keyframes."""
    return shape.model_copy(update={"fill_color": TRANSPARENT, "stroke_color": TRANSPARENT})
