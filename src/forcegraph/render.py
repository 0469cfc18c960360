from __future__ import annotations

from pathlib import Path
from typing import Optional

from .frame import CurvedEdge, Frame, build_frame
from .layout import LayoutEngine
from .viewport import Viewport


def render_png(
    engine: LayoutEngine,
    output_path: str | Path,
    viewport: Optional[Viewport] = None,
    node_color: str = "#f5f5f5",
    border_color: str = "#111111",
    edge_color: str = "#2b2b2b",
    text_color: str = "#111111",
    background: str = "#ffffff",
    dpi: int = 100,
) -> Frame:
    """Render the engine's current layout to PNG and return the drawn frame.

    Without a *viewport* the layout is auto-fitted to the configured
    canvas.  Requires matplotlib; imported lazily to keep the core
    package lightweight.
    """
    try:
        import matplotlib.pyplot as plt
        from matplotlib.patches import Circle, PathPatch
        from matplotlib.path import Path as MplPath
    except ImportError as exc:  # pragma: no cover - requires optional dep
        raise RuntimeError(
            "matplotlib is required for rendering. Install with `pip install matplotlib`."
        ) from exc

    if not engine.is_bound:
        raise ValueError("A graph must be bound before rendering.")

    canvas = engine.config.canvas
    style = engine.config.nodes
    if viewport is None:
        viewport = Viewport()
        engine.fit(viewport)
    frame = build_frame(engine, viewport)

    fig = plt.figure(figsize=(canvas.width / dpi, canvas.height / dpi), dpi=dpi)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_facecolor(background)

    for edge in frame.edges:
        if isinstance(edge, CurvedEdge):
            path = MplPath(
                [edge.start, edge.control, edge.end],
                [MplPath.MOVETO, MplPath.CURVE3, MplPath.CURVE3],
            )
            ax.add_patch(PathPatch(path, facecolor="none", edgecolor=edge_color, linewidth=1.5))
        else:
            xs, ys = zip(edge.start, edge.end)
            ax.plot(xs, ys, color=edge_color, linewidth=1.5)
        ax.text(*edge.label_anchor, edge.label, color=text_color, fontsize=9)

    for glyph in frame.vertices:
        if style.render_borders:
            ax.add_patch(Circle(glyph.center, (glyph.size + style.border_size) / 2,
                                facecolor=border_color, zorder=3))
        ax.add_patch(Circle(glyph.center, glyph.size / 2, facecolor=node_color, zorder=4))
        ax.text(glyph.center[0] + glyph.size / 2 + 2, glyph.center[1] + 4, glyph.label,
                color=text_color, fontsize=10, zorder=5)

    # Screen space: origin top-left, y grows downwards.
    ax.set_xlim(0, canvas.width)
    ax.set_ylim(canvas.height, 0)
    ax.set_aspect("equal")
    ax.axis("off")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, facecolor=background)
    plt.close(fig)
    return frame
