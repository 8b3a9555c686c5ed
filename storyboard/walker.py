"""Walk a scene graph and collect shapes, keyframe defs and effect groups per scene."""

import logging
from dataclasses import dataclass, field

from storyboard.errors import UnknownEffectError
from storyboard.geometry import add
from storyboard.models import (
    Effect,
    EffectGroupDef,
    EffectKind,
    GroupNode,
    KeyframeDef,
    PathNode,
    PathSegment,
    SceneGraph,
    Shape,
    ShapeProperties,
    Vector2,
)
from storyboard.naming import (
    EffectGroupName,
    group_base_name,
    is_keyframe_name,
    parse_effect_group_name,
    parse_keyframe_name,
    parse_scene_name,
    parse_stage_name,
)

logger = logging.getLogger(__name__)


@dataclass
class SceneSource:
    """Everything the walker found inside one scene, in discovery order."""
    id: str
    duration: int
    shapes: list[Shape] = field(default_factory=list)
    keyframes: list[KeyframeDef] = field(default_factory=list)
    effect_groups: list[EffectGroupDef] = field(default_factory=list)


def walk_document(graph: SceneGraph) -> list[SceneSource]:
    """Return one SceneSource per scene of every stage, in document order."""
    scenes: list[SceneSource] = []
    for stage in graph.children:
        stage_name = parse_stage_name(stage.name)
        if stage_name is None or not isinstance(stage, GroupNode):
            continue
        for scene_node in stage.children:
            if not isinstance(scene_node, GroupNode):
                logger.warning("Skipping non-group scene %r in %r", scene_node.name, stage.name)
                continue
            scenes.append(walk_scene(scene_node, stage_name.viewport_offset))
    logger.debug("Found %d scenes", len(scenes))
    return scenes


def walk_scene(scene_node: GroupNode, viewport_offset: Vector2) -> SceneSource:
    scene_name = parse_scene_name(scene_node.name)
    source = SceneSource(id=scene_name.id, duration=scene_name.duration)

    # Explicit stack of (node, id prefix); children pushed reversed for pre-order
    root_prefix = scene_name.id + ":"
    stack: list[tuple[GroupNode | PathNode, str]] = [
        (child, root_prefix) for child in reversed(scene_node.children)
    ]
    while stack:
        node, prefix = stack.pop()
        if isinstance(node, GroupNode):
            effect_name = parse_effect_group_name(node.name)
            if effect_name is not None:
                source.effect_groups.append(
                    _effect_group(node, effect_name, prefix, viewport_offset)
                )
            group_prefix = prefix + group_base_name(node.name) + ":"
            stack.extend((child, group_prefix) for child in reversed(node.children))
            continue

        keyframe_name = parse_keyframe_name(node.name)
        if keyframe_name is not None:
            source.keyframes.append(KeyframeDef(
                target=prefix + keyframe_name.target,
                offset=keyframe_name.offset,
                properties=_node_properties(node, viewport_offset),
            ))
        else:
            source.shapes.append(_shape(node, prefix, viewport_offset))

    logger.debug(
        "Scene %s (%d frames): %d shapes, %d keyframes, %d effect groups",
        source.id, source.duration, len(source.shapes),
        len(source.keyframes), len(source.effect_groups),
    )
    return source


def _shape(node: PathNode, prefix: str, viewport_offset: Vector2) -> Shape:
    properties = _node_properties(node, viewport_offset)
    return Shape(
        id=prefix + node.name,
        fill_color=properties.fill_color,
        stroke_color=properties.stroke_color,
        stroke_width=properties.stroke_width,
        broken=not node.closed,
        path=properties.path,
    )


def _node_properties(node: PathNode, viewport_offset: Vector2) -> ShapeProperties:
    """Style and geometry of a path; stroke only counts with both colour and width."""
    has_stroke = bool(node.stroke_width) and bool(node.stroke_color)
    return ShapeProperties(
        fill_color=node.fill_color or None,
        stroke_color=node.stroke_color if has_stroke else None,
        stroke_width=node.stroke_width if has_stroke else None,
        path=[
            PathSegment(
                point=add(segment.point, viewport_offset),
                handle_in=segment.handle_in,
                handle_out=segment.handle_out,
            )
            for segment in node.segments
        ],
    )


def _effect_group(
    node: GroupNode,
    name: EffectGroupName,
    prefix: str,
    viewport_offset: Vector2,
) -> EffectGroupDef:
    bounds = node.bounds.translated(viewport_offset)
    effects = []
    for tag in name.effects:
        try:
            kind = EffectKind(tag.name)
        except ValueError:
            raise UnknownEffectError(tag.name) from None
        effects.append(Effect(kind=kind, offset=tag.offset, duration=tag.duration, bounds=bounds))
    return EffectGroupDef(
        id=prefix + name.base,
        targets=_target_ids(node, prefix),
        effects=effects,
    )


def _target_ids(group: GroupNode, prefix: str) -> list[str]:
    """Ids of every non-keyframe path below group, in document order."""
    ids: list[str] = []
    stack: list[tuple[GroupNode | PathNode, str]] = [(group, prefix)]
    while stack:
        node, node_prefix = stack.pop()
        if isinstance(node, GroupNode):
            child_prefix = node_prefix + group_base_name(node.name) + ":"
            stack.extend((child, child_prefix) for child in reversed(node.children))
        elif not is_keyframe_name(node.name):
            ids.append(node_prefix + node.name)
    return ids
