"""Load scene-graph and animation documents from disk."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from storyboard.models import AnimationDocument, SceneGraph

logger = logging.getLogger(__name__)


def load_scene_graph(path: Path) -> SceneGraph:
    """Read a scene graph exported by the markup parser as JSON."""
    raw = json.loads(path.read_text())
    if isinstance(raw, list):
        raw = {"children": raw}
    graph = SceneGraph.model_validate(raw)
    logger.debug("Loaded scene graph %s with %d top-level nodes", path, len(graph.children))
    return graph


def load_animation_document(path: Path | None) -> AnimationDocument:
    """Read the animation document (YAML or JSON). A missing path means no text."""
    if path is None:
        return AnimationDocument()
    raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
    return AnimationDocument.model_validate(raw)
