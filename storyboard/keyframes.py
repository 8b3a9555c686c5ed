"""Keyframe lookup, interpolation and ordered insertion.

Keyframe lists are always ascending by offset. Nothing here mutates its input.
"""

from storyboard.colors import TRANSPARENT
from storyboard.geometry import ease_in_out_expo, interpolate_path
from storyboard.models import ShapeKeyframe


def normalize_offset(offset: int, duration: int) -> int:
    """Negative offsets count back from the end of the scene."""
    return duration + offset if offset < 0 else offset


def before(keyframes: list[ShapeKeyframe], offset: int) -> list[ShapeKeyframe]:
    return [k for k in keyframes if k.offset < offset]


def after(keyframes: list[ShapeKeyframe], offset: int) -> list[ShapeKeyframe]:
    return [k for k in keyframes if k.offset > offset]


def until(keyframes: list[ShapeKeyframe], offset: int) -> list[ShapeKeyframe]:
    return [k for k in keyframes if k.offset <= offset]


def since(keyframes: list[ShapeKeyframe], offset: int) -> list[ShapeKeyframe]:
    return [k for k in keyframes if k.offset >= offset]


def active_keyframe(keyframes: list[ShapeKeyframe], offset: int) -> ShapeKeyframe:
    """Latest keyframe at or before offset, falling back to the first one."""
    candidates = until(keyframes, offset)
    return candidates[-1] if candidates else keyframes[0]


def value_at_offset(keyframes: list[ShapeKeyframe], offset: int) -> ShapeKeyframe:
    """Keyframe describing the shape at offset.

    Exact matches are returned as-is. Past the last keyframe the last value is
    held; between two keyframes the path is blended with an exponential ease.
    Colours are never interpolated here.
    """
    current = active_keyframe(keyframes, offset)
    if current.offset == offset:
        return current
    following = after(keyframes, offset)
    if not following or current.offset > offset:
        return current.at(offset)
    return interpolate(current, following[0], offset)


def interpolate(first: ShapeKeyframe, second: ShapeKeyframe, offset: int) -> ShapeKeyframe:
    if first.offset == offset:
        return first
    if second.offset == offset:
        return second
    ratio = (offset - first.offset) / (second.offset - first.offset)
    path1 = first.properties.path
    path2 = second.properties.path
    if path1 is None or path2 is None:
        return first.at(offset)
    path = interpolate_path(path1, path2, ease_in_out_expo(ratio))
    return first.at(offset).patched(path=path)


def insert_keyframe(keyframes: list[ShapeKeyframe], keyframe: ShapeKeyframe) -> list[ShapeKeyframe]:
    """Insert in offset order; an existing keyframe at the same offset is replaced."""
    return before(keyframes, keyframe.offset) + [keyframe] + after(keyframes, keyframe.offset)


def hidden(keyframe: ShapeKeyframe, offset: int | None = None) -> ShapeKeyframe:
    """Copy of keyframe with both colours fully transparent."""
    moved = keyframe if offset is None else keyframe.at(offset)
    return moved.patched(fill_color=TRANSPARENT, stroke_color=TRANSPARENT)


def shift(keyframes: list[ShapeKeyframe], delta: int) -> list[ShapeKeyframe]:
    return [k.at(k.offset + delta) for k in keyframes]
