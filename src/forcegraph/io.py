from __future__ import annotations

import json
from pathlib import Path
from typing import Union

from .graph import Graph


PathLike = Union[str, Path]


def load_json(path: PathLike) -> Graph:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return Graph.from_dict(data)


def save_json(graph: Graph, path: PathLike) -> None:
    Path(path).write_text(graph.to_json(), encoding="utf-8")
