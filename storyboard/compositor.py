"""Flatten compiled scenes into one global shape timeline."""

from storyboard.keyframes import shift
from storyboard.models import Scene, Shape


def scene_starts(scenes: list[Scene]) -> list[int]:
    """Global start frame of each scene: the summed durations of the scenes before it."""
    starts = []
    elapsed = 0
    for scene in scenes:
        starts.append(elapsed)
        elapsed += scene.duration
    return starts


def composite_scenes(scenes: list[Scene]) -> list[Shape]:
    """Shift every keyframe by its scene's start and concatenate the shapes.

    Shape ids are only unique within a scene; shapes from different scenes
    are kept side by side even when their ids match.
    """
    shapes: list[Shape] = []
    for scene, start in zip(scenes, scene_starts(scenes)):
        shapes.extend(
            shape.model_copy(update={"keyframes": shift(shape.keyframes, start)})
            for shape in scene.shapes
        )
    return shapes
