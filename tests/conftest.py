"""Shared test fixtures for storyboard tests."""

import random

import pytest

from storyboard.models import (
    Bounds,
    GroupNode,
    PathNode,
    PathSegment,
    SceneGraph,
    Shape,
    ShapeKeyframe,
    ShapeProperties,
    Vector2,
)

RED = "rgb(255,0,0)"


def _square_segments(x: float, y: float, size: float) -> list[PathSegment]:
    corners = [(x, y), (x + size, y), (x + size, y + size), (x, y + size)]
    return [PathSegment(point=Vector2(x=cx, y=cy)) for cx, cy in corners]


@pytest.fixture()
def rng():
    return random.Random(0)


@pytest.fixture()
def make_square():
    """Factory for square path nodes: make_square(name, x=0, y=0, size=10, ...)."""
    def _make(
        name: str,
        x: float = 0,
        y: float = 0,
        size: float = 10,
        fill: str | None = RED,
        stroke: str | None = None,
        stroke_width: float | None = None,
    ) -> PathNode:
        return PathNode(
            name=name,
            fill_color=fill,
            stroke_color=stroke,
            stroke_width=stroke_width,
            closed=True,
            bounds=Bounds(x=x, y=y, width=size, height=size),
            segments=_square_segments(x, y, size),
        )
    return _make


@pytest.fixture()
def make_group():
    def _make(name: str, *children) -> GroupNode:
        return GroupNode(name=name, children=list(children))
    return _make


@pytest.fixture()
def make_document(make_group):
    """Wrap scene groups in a single stage at the origin."""
    def _make(*scenes, origin: str = "0,0") -> SceneGraph:
        return SceneGraph(children=[make_group(f"stage:{origin}", *scenes)])
    return _make


@pytest.fixture()
def square_shape():
    """A 10x10 red square at the origin, with no keyframes."""
    return Shape(id="scene:box", fill_color=RED, path=_square_segments(0, 0, 10))


@pytest.fixture()
def make_keyframe():
    """Keyframe whose path is a single point at (x, 0)."""
    def _make(offset: int, x: float = 0, fill: str | None = RED) -> ShapeKeyframe:
        return ShapeKeyframe(
            offset=offset,
            properties=ShapeProperties(
                fill_color=fill,
                path=[PathSegment(point=Vector2(x=x, y=0))],
            ),
        )
    return _make
