"""Vector math, path transforms and easing curves."""

import math

from storyboard.models import PathSegment, Vector2


def add(a: Vector2, b: Vector2) -> Vector2:
    return Vector2(x=a.x + b.x, y=a.y + b.y)


def subtract(a: Vector2, b: Vector2) -> Vector2:
    return Vector2(x=a.x - b.x, y=a.y - b.y)


def scale(vector: Vector2, scalar: float) -> Vector2:
    return Vector2(x=vector.x * scalar, y=vector.y * scalar)


def length(vector: Vector2) -> float:
    return math.hypot(vector.x, vector.y)


def lerp(a: Vector2, b: Vector2, ratio: float) -> Vector2:
    return add(a, scale(subtract(b, a), ratio))


def scale_about(vector: Vector2, factor: float, origin: Vector2) -> Vector2:
    return add(origin, scale(subtract(vector, origin), factor))


# --- Easing ---


def ease_out_quad(t: float) -> float:
    return -1 * t * (t - 2)


def ease_in_out_quad(t: float) -> float:
    t /= 0.5
    if t < 1:
        return 0.5 * t * t
    t -= 1
    return -0.5 * (t * (t - 2) - 1)


def ease_in_out_expo(t: float) -> float:
    """Exponential ease; exact at both ends so endpoint keyframes round-trip."""
    if t == 0 or t == 1:
        return float(t)
    t *= 2
    if t < 1:
        return 0.5 * math.pow(2, 10 * (t - 1))
    return 0.5 * (-math.pow(2, -10 * (t - 1)) + 2)


# --- Paths ---


def interpolate_path(
    path1: list[PathSegment], path2: list[PathSegment], ratio: float,
) -> list[PathSegment]:
    """Blend two paths of identical topology component-wise."""
    return [
        PathSegment(
            point=lerp(s1.point, s2.point, ratio),
            handle_in=lerp(s1.handle_in, s2.handle_in, ratio),
            handle_out=lerp(s1.handle_out, s2.handle_out, ratio),
        )
        for s1, s2 in zip(path1, path2)
    ]


def translate_path(path: list[PathSegment], offset: Vector2) -> list[PathSegment]:
    return [
        PathSegment(point=add(s.point, offset), handle_in=s.handle_in, handle_out=s.handle_out)
        for s in path
    ]


def scale_path(path: list[PathSegment], factor: float, origin: Vector2) -> list[PathSegment]:
    return [
        PathSegment(
            point=scale_about(s.point, factor, origin),
            handle_in=scale(s.handle_in, factor),
            handle_out=scale(s.handle_out, factor),
        )
        for s in path
    ]


def warp_path(
    path: list[PathSegment],
    origin: Vector2,
    max_distance: float,
    warp_factor: float,
    gravity: float,
) -> list[PathSegment]:
    """Scale each point about origin by an amount weighted by its distance.

    Gravity grows with distance from origin, up to max_distance, so outer
    points are displaced more than inner ones. Handles are scaled as absolute
    positions and converted back to offsets from the warped point.
    """
    warped = []
    for s in path:
        distance = length(subtract(s.point, origin))
        reach = min(1.0, distance / max_distance) if max_distance else 1.0
        gravity_ratio = gravity * ease_out_quad(reach)
        factor = max(0.0, 1 - warp_factor * (1 + gravity * gravity_ratio))
        point = scale_about(s.point, factor, origin)
        handle_in = subtract(scale_about(add(s.handle_in, s.point), factor, origin), point)
        handle_out = subtract(scale_about(add(s.handle_out, s.point), factor, origin), point)
        warped.append(PathSegment(point=point, handle_in=handle_in, handle_out=handle_out))
    return warped
