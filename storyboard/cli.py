"""CLI entry point for the storyboard compiler."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from storyboard.compiler import compile_animation
from storyboard.config import load_config
from storyboard.documents import load_animation_document, load_scene_graph
from storyboard.errors import StoryboardError

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Storyboard animation compiler")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # compile command
    compile_parser = sub.add_parser("compile", help="Compile scene graphs into an animation timeline")
    compile_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    compile_parser.add_argument(
        "scene_graphs", nargs="+",
        help="Scene graph JSON documents, compiled in the order given",
    )
    compile_parser.add_argument(
        "-a", "--animation", default=None,
        help="Animation document (YAML or JSON) with text frames",
    )
    compile_parser.add_argument("-o", "--output", default=None, help="Output path (default: stdout)")
    compile_parser.add_argument("-c", "--config", default=None, help="Config YAML path")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command != "compile":
        parser.print_help()
        return

    config = load_config(Path(args.config) if args.config else None)
    try:
        graphs = [load_scene_graph(Path(p)) for p in args.scene_graphs]
        document = load_animation_document(Path(args.animation) if args.animation else None)
        animation = compile_animation(graphs, document, config)
    except (StoryboardError, ValidationError) as e:
        logger.error("Compile failed: %s", e)
        sys.exit(1)

    output = json.dumps(animation.to_ir(), indent="\t")
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output + "\n")
        print(f"Saved animation to {output_path}", file=sys.stderr)
    else:
        sys.stdout.write(output + "\n")


if __name__ == "__main__":
    main()
