"""Classify scene-graph node names by the storyboard naming grammar.

Every parser returns None when the name does not match; unmatched nodes are
ordinary groups or shapes.
"""

import re
from dataclasses import dataclass

from storyboard.models import Vector2

STAGE_NAME = re.compile(r"^stage:(-?\d\.?\d*),(-?\d\.?\d*)$", re.ASCII)
SCENE_NAME = re.compile(r"^(.*?)-(\d+)$", re.ASCII)
KEYFRAME_NAME = re.compile(r"^([^:]+):(-?\d+)$", re.ASCII)
EFFECT_TAG = r"\[\w+(?:(?::-?\d+)?:\d+)?\]"
EFFECT_GROUP_NAME = re.compile(rf"^(.*?)((?:{EFFECT_TAG})+)$", re.ASCII)
EFFECT_TAG_PARTS = re.compile(r"\[(\w+)(?:(?::(-?\d+))?:(\d+))?\]", re.ASCII)

DEFAULT_SCENE_DURATION = 1


@dataclass(frozen=True)
class StageName:
    origin: Vector2

    @property
    def viewport_offset(self) -> Vector2:
        return Vector2(x=-self.origin.x, y=-self.origin.y)


@dataclass(frozen=True)
class SceneName:
    id: str
    duration: int


@dataclass(frozen=True)
class KeyframeName:
    target: str
    offset: int


@dataclass(frozen=True)
class EffectTag:
    name: str
    offset: int
    duration: int | None


@dataclass(frozen=True)
class EffectGroupName:
    base: str
    effects: tuple[EffectTag, ...]


def parse_stage_name(name: str) -> StageName | None:
    match = STAGE_NAME.match(name)
    if not match:
        return None
    return StageName(origin=Vector2(x=float(match.group(1)), y=float(match.group(2))))


def parse_scene_name(name: str) -> SceneName:
    """Scene names always parse; without a -<frames> suffix the duration is 1."""
    match = SCENE_NAME.match(name)
    if not match:
        return SceneName(id=name, duration=DEFAULT_SCENE_DURATION)
    return SceneName(id=match.group(1), duration=int(match.group(2)))


def parse_keyframe_name(name: str) -> KeyframeName | None:
    match = KEYFRAME_NAME.match(name)
    if not match:
        return None
    return KeyframeName(target=match.group(1), offset=int(match.group(2)))


def parse_effect_group_name(name: str) -> EffectGroupName | None:
    """Parse `base[name]`, `base[name:duration]` or `base[name:offset:duration]` tags."""
    match = EFFECT_GROUP_NAME.match(name)
    if not match:
        return None
    effects = tuple(
        EffectTag(
            name=tag.group(1),
            offset=int(tag.group(2) or 0),
            duration=int(tag.group(3)) if tag.group(3) is not None else None,
        )
        for tag in EFFECT_TAG_PARTS.finditer(match.group(2))
    )
    return EffectGroupName(base=match.group(1), effects=effects)


def is_keyframe_name(name: str) -> bool:
    return KEYFRAME_NAME.match(name) is not None


def group_base_name(name: str) -> str:
    """Group id used in hierarchical ids: effect tags are stripped."""
    parsed = parse_effect_group_name(name)
    return parsed.base if parsed else name
