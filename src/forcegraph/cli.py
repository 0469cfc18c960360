"""forcegraph command-line interface."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from .config import LayoutConfig, load_config
from .graph import Graph, demo_graph, validate_payload
from .io import load_json
from .layout import LayoutEngine
from .viewport import Viewport

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Force-directed graph layout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Validate a graph file")
    validate.add_argument("--in", dest="input_path", required=True)

    layout = sub.add_parser("layout", help="Lay out a graph and print a JSON summary")
    _add_simulation_args(layout)
    layout.add_argument("--in", dest="input_path", required=True)

    render = sub.add_parser("render", help="Lay out a graph and render it to PNG")
    _add_simulation_args(render)
    render.add_argument("--in", dest="input_path", required=True)
    render.add_argument("--out", dest="output_path", required=True)
    render.add_argument("--dpi", type=int, default=100)

    demo = sub.add_parser("demo", help="Render the built-in demo graph")
    _add_simulation_args(demo)
    demo.add_argument("--out", dest="output_path", default="exports/demo.png")

    return parser


def _add_simulation_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--config", dest="config_path", help="JSON layout config")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "validate":
        _cmd_validate(args)

    elif args.command == "layout":
        engine = _run_layout(load_json(args.input_path), args)
        print(json.dumps(layout_summary(engine), indent=2))

    elif args.command == "render":
        _cmd_render(load_json(args.input_path), args)

    elif args.command == "demo":
        _cmd_render(demo_graph(), args)


def _cmd_validate(args) -> None:
    payload = json.loads(Path(args.input_path).read_text(encoding="utf-8"))
    errors = validate_payload(payload)
    if errors:
        for error in errors:
            print(error)
        raise SystemExit(1)
    print("OK")


def _cmd_render(graph: Graph, args) -> None:
    from .render import render_png

    engine = _run_layout(graph, args)
    render_png(engine, args.output_path, dpi=getattr(args, "dpi", 100))
    print(f"Saved {args.output_path}")


def _run_layout(graph: Graph, args) -> LayoutEngine:
    config = load_config(args.config_path) if args.config_path else LayoutConfig()
    engine = LayoutEngine(config, seed=args.seed)
    engine.bind(graph)
    logger.info(
        "Simulating %d steps over %d vertices and %d edges",
        args.steps, graph.vertex_count(), graph.edge_count(),
    )
    engine.advance(args.steps)
    return engine


def layout_summary(engine: LayoutEngine) -> dict:
    viewport = Viewport()
    engine.fit(viewport)
    bounds = engine.bounds()
    return {
        "vertices": engine.vertex_count,
        "edge_spots": len(engine.edge_spots),
        "parallel_spots": sum(1 for spot in engine.edge_spots if spot.is_parallel()),
        "degree_bounds": [engine.degree_bounds.minimum, engine.degree_bounds.maximum],
        "bounds": list(bounds) if bounds else None,
        "viewport": {"shift": list(viewport.shift), "zoom": viewport.zoom},
    }


if __name__ == "__main__":
    main()
