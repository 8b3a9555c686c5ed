"""Procedural shape effects applied by effect groups.

Each effect takes a shape's keyframe list and returns a new one. Values inside
a window are sampled with value_at_offset before being transformed, so effects
compose with keyframes and with effects applied earlier in the chain.
"""

import logging
import math
import random
from collections import defaultdict
from typing import Callable

from storyboard.colors import with_alpha
from storyboard.effects.base import EffectWindow, shape_window
from storyboard.errors import UnknownTargetError
from storyboard.geometry import (
    ease_in_out_expo,
    ease_in_out_quad,
    length,
    scale_path,
    translate_path,
    warp_path,
)
from storyboard.keyframes import after, before, hidden, insert_keyframe, since, until, value_at_offset
from storyboard.models import (
    Effect,
    EffectGroupDef,
    EffectKind,
    PathSegment,
    Shape,
    ShapeKeyframe,
    Vector2,
)
from storyboard.timeline import initial_keyframe

logger = logging.getLogger(__name__)

ANIMATE_IN_SCALE = 0.1
ANIMATE_IN_OPACITY = 0.1
BOUNCE_SCALE = 1.1
BOUNCE_OPACITY = 0.5
BOUNCE_DURATION = 0.25
ANIMATE_OUT_SCALE = 0.3
ANIMATE_OUT_OPACITY = 0.1
PULSE_SCALE = 1.3
POP_SCALE = 1.3
JITTER_AMOUNT = 7
EXPLODE_GRAVITY = 2

ShapeEffect = Callable[[list[ShapeKeyframe], Effect, int, random.Random], list[ShapeKeyframe]]


# --- Group ordering ---


def innermost_first(effect_groups: list[EffectGroupDef]) -> list[EffectGroupDef]:
    """Order in which effect groups reach a shape: last discovered applies first.

    Groups are discovered parent before child, so nested groups apply before
    the groups that contain them.
    """
    return list(reversed(effect_groups))


def transform_shapes(
    shapes: list[Shape],
    effect_groups: list[EffectGroupDef],
    scene_duration: int,
    rng: random.Random,
) -> list[Shape]:
    """Run every effect group over the shapes it targets."""
    shape_ids = {shape.id for shape in shapes}
    groups_by_shape: dict[str, list[EffectGroupDef]] = defaultdict(list)
    for group in innermost_first(effect_groups):
        for target in group.targets:
            if target not in shape_ids:
                raise UnknownTargetError(target)
            groups_by_shape[target].append(group)

    return [
        apply_effect_groups(shape, groups_by_shape.get(shape.id, []), scene_duration, rng)
        for shape in shapes
    ]


def apply_effect_groups(
    shape: Shape,
    groups: list[EffectGroupDef],
    scene_duration: int,
    rng: random.Random,
) -> Shape:
    if not groups:
        return shape
    keyframes = shape.keyframes
    for group in groups:
        if not keyframes:
            keyframes = [initial_keyframe(shape)]
        for effect in group.effects:
            keyframes = apply_effect(keyframes, effect, scene_duration, rng)
    logger.debug(
        "Shape %s: %d effect groups -> %d keyframes", shape.id, len(groups), len(keyframes),
    )
    return shape.model_copy(update={"keyframes": keyframes})


def apply_effect(
    keyframes: list[ShapeKeyframe],
    effect: Effect,
    scene_duration: int,
    rng: random.Random,
) -> list[ShapeKeyframe]:
    if _window(effect, scene_duration).duration == 0:
        logger.warning("Skipping %s: empty window", effect.kind.value)
        return keyframes
    return SHAPE_EFFECTS[effect.kind](keyframes, effect, scene_duration, rng)


# --- Effects ---


def animate_in(keyframes, effect, scene_duration, rng):
    window = _window(effect, scene_duration)
    origin = effect.bounds.center
    start = _faded_and_scaled(
        value_at_offset(keyframes, window.offset), ANIMATE_IN_OPACITY, ANIMATE_IN_SCALE, origin,
    )
    end = value_at_offset(keyframes, window.last)
    if window.last == window.offset:
        # one-frame window: the entrance frame replaces the resting state
        tweened = insert_keyframe(insert_keyframe(keyframes, end), start)
    else:
        tweened = insert_keyframe(keyframes, start)
        bounce_offset = window.last - math.ceil(BOUNCE_DURATION * window.duration)
        if window.offset < bounce_offset < window.last:
            bounce = _faded_and_scaled(
                value_at_offset(keyframes, bounce_offset), BOUNCE_OPACITY, BOUNCE_SCALE, origin,
            )
            tweened = insert_keyframe(tweened, bounce)
        tweened = insert_keyframe(tweened, end)

    if window.offset == 0:
        return tweened
    return _hidden_before(tweened, hidden(start, window.offset - 1), window.offset)


def animate_out(keyframes, effect, scene_duration, rng):
    window = _window(effect, scene_duration)
    origin = effect.bounds.center
    start = value_at_offset(keyframes, window.offset)
    end = _faded_and_scaled(
        value_at_offset(keyframes, window.last), ANIMATE_OUT_OPACITY, ANIMATE_OUT_SCALE, origin,
    )

    tweened = insert_keyframe(insert_keyframe(keyframes, start), end)
    if window.last == scene_duration - 1:
        return tweened
    return _hidden_after(until(tweened, window.last), hidden(end, window.last + 1), scene_duration)


def fade_in(keyframes, effect, scene_duration, rng):
    window = _window(effect, scene_duration)
    frames = [
        _faded(value_at_offset(keyframes, offset), window.progress(offset))
        for offset in window.frames
    ]
    transformed = frames + after(keyframes, window.last)
    if window.offset == 0:
        return transformed
    hidden_start = hidden(value_at_offset(keyframes, window.offset - 1))
    return _hidden_before(transformed, hidden_start, window.offset)


def fade_out(keyframes, effect, scene_duration, rng):
    window = _window(effect, scene_duration)
    frames = [
        _faded(value_at_offset(keyframes, offset), 1 - window.progress(offset))
        for offset in window.frames
    ]
    transformed = before(keyframes, window.offset) + frames
    if window.last == scene_duration - 1:
        return transformed + after(keyframes, window.last)
    hidden_end = hidden(value_at_offset(keyframes, window.end))
    return _hidden_after(transformed, hidden_end, scene_duration)


def pulse(keyframes, effect, scene_duration, rng):
    window = _window(effect, scene_duration)
    origin = effect.bounds.center

    def pulse_scale(t: float) -> float:
        eased = ease_in_out_quad(t / 0.5 if t <= 0.5 else 1 - (t - 0.5) / 0.5)
        return 1 + eased * (PULSE_SCALE - 1)

    frames = []
    for offset in window.frames:
        keyframe = value_at_offset(keyframes, offset)
        factor = pulse_scale(window.progress(offset))
        frames.append(keyframe.patched(path=_scaled(keyframe, factor, origin)))
    return _replace_window(keyframes, window, frames)


def pop(keyframes, effect, scene_duration, rng):
    """Swell to POP_SCALE, then vanish on the last frame of the window."""
    window = _window(effect, scene_duration)
    origin = effect.bounds.center

    frames = []
    for offset in window.frames:
        keyframe = value_at_offset(keyframes, offset)
        t = window.progress(offset)
        if offset == window.last:
            factor, opacity = 0.0, 0.0
        else:
            factor = 1 + ease_in_out_quad(t) * (POP_SCALE - 1)
            opacity = ease_in_out_quad(1 - t)
        frames.append(_faded(keyframe, opacity).patched(path=_scaled(keyframe, factor, origin)))
    return _replace_window(keyframes, window, frames)


def jitter(keyframes, effect, scene_duration, rng):
    window = _window(effect, scene_duration)

    frames = []
    for offset in window.frames:
        keyframe = value_at_offset(keyframes, offset)
        intensity = window.progress(offset) * JITTER_AMOUNT
        dx = -0.5 * intensity + rng.random() * intensity
        dy = -0.5 * intensity + rng.random() * intensity
        path = keyframe.properties.path
        if path is not None:
            path = translate_path(path, Vector2(x=dx, y=dy))
        frames.append(keyframe.patched(path=path))
    return _replace_window(keyframes, window, frames)


def explode(keyframes, effect, scene_duration, rng):
    """Pull every point toward the bounds centre, farther points faster, until the shape is gone."""
    window = _window(effect, scene_duration)
    bounds = effect.bounds
    origin = bounds.center
    max_distance = length(Vector2(x=bounds.width / 2, y=bounds.height / 2))

    frames = []
    for offset in window.frames:
        keyframe = value_at_offset(keyframes, offset)
        remaining = 1 - window.progress(offset)
        warp_factor = 1 - ease_in_out_expo(remaining)
        path = keyframe.properties.path
        if path is not None:
            path = warp_path(path, origin, max_distance, warp_factor, EXPLODE_GRAVITY)
        frames.append(keyframe.patched(path=path))
    return _replace_window(keyframes, window, frames)


SHAPE_EFFECTS: dict[EffectKind, ShapeEffect] = {
    EffectKind.ANIMATE_IN: animate_in,
    EffectKind.ANIMATE_OUT: animate_out,
    EffectKind.FADE_IN: fade_in,
    EffectKind.FADE_OUT: fade_out,
    EffectKind.PULSE: pulse,
    EffectKind.POP: pop,
    EffectKind.JITTER: jitter,
    EffectKind.EXPLODE: explode,
}


# --- Helpers ---


def _window(effect: Effect, scene_duration: int) -> EffectWindow:
    return shape_window(effect.offset, effect.duration, scene_duration)


def _faded(keyframe: ShapeKeyframe, opacity: float) -> ShapeKeyframe:
    properties = keyframe.properties
    return keyframe.patched(
        fill_color=with_alpha(properties.fill_color, opacity),
        stroke_color=with_alpha(properties.stroke_color, opacity),
    )


def _scaled(keyframe: ShapeKeyframe, factor: float, origin: Vector2) -> list[PathSegment] | None:
    path = keyframe.properties.path
    return scale_path(path, factor, origin) if path is not None else None


def _faded_and_scaled(
    keyframe: ShapeKeyframe, opacity: float, factor: float, origin: Vector2,
) -> ShapeKeyframe:
    return _faded(keyframe, opacity).patched(path=_scaled(keyframe, factor, origin))


def _replace_window(
    keyframes: list[ShapeKeyframe], window: EffectWindow, frames: list[ShapeKeyframe],
) -> list[ShapeKeyframe]:
    return before(keyframes, window.offset) + frames + after(keyframes, window.last)


def _hidden_before(
    keyframes: list[ShapeKeyframe], hidden_keyframe: ShapeKeyframe, offset: int,
) -> list[ShapeKeyframe]:
    """Drop everything before offset; the shape stays transparent from frame 0 until then."""
    head = [hidden_keyframe]
    if hidden_keyframe.offset > 0:
        head.insert(0, hidden_keyframe.at(0))
    return head + since(keyframes, offset)


def _hidden_after(
    keyframes: list[ShapeKeyframe], hidden_keyframe: ShapeKeyframe, scene_duration: int,
) -> list[ShapeKeyframe]:
    """Append the hiding keyframe and keep it transparent through the scene end."""
    tail = [hidden_keyframe]
    if hidden_keyframe.offset < scene_duration:
        tail.append(hidden_keyframe.at(scene_duration))
    return keyframes + tail
