import sys
from pathlib import Path

ROOT = Path(__file__).parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from forcegraph.graph import demo_graph
from forcegraph.interaction import InteractionController
from forcegraph.layout import LayoutEngine


def main() -> None:
    graph = demo_graph()
    errors = graph.validate()
    if errors:
        raise SystemExit("\n".join(errors))

    engine = LayoutEngine(seed=1)
    engine.bind(graph)
    controller = InteractionController(engine)
    controller.on_click(lambda vid: print("Clicked", graph.element(vid)))
    controller.start()

    frame = None
    for _ in range(50):
        frame = controller.tick()

    print("Vertices:", graph.vertex_count())
    print("Edges:", graph.edge_count())
    print("Edge spots:", len(engine.edge_spots))
    print("Viewport:", frame.viewport)
    for glyph in frame.vertices:
        print(f"  {glyph.label}: ({glyph.center[0]:.1f}, {glyph.center[1]:.1f}) size {glyph.size:.0f}")

    first = frame.vertices[0]
    controller.click(*first.center)


if __name__ == "__main__":
    main()
