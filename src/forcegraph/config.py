"""Tunable constants for the simulation, canvas and node sizing.

Every value here used to be a global in the drawing widget.  They are
frozen dataclasses now so several independently configured engines can
coexist; build modified copies with :func:`dataclasses.replace`.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class ConfigError(ValueError):
    """Raised for configuration values that would break the simulation."""


@dataclass(frozen=True)
class SimulationConfig:
    """Force-model coefficients and stepping parameters.

    Attraction is ``spring_force * ln(distance / spring_scale) / V`` and
    repulsion is ``repulsion_scale / distance**2``.  Each step moves a
    vertex by ``speed`` times its net force.
    """

    spring_force: float = 1.0
    spring_scale: float = 1.0
    repulsion_scale: float = 5000.0
    speed: float = 1.0
    steps_per_frame: int = 20
    spawn_exponent: float = 0.3

    def __post_init__(self) -> None:
        if self.spring_scale <= 0:
            raise ConfigError(f"spring_scale must be > 0, got {self.spring_scale}")
        if self.repulsion_scale < 0:
            raise ConfigError(f"repulsion_scale must be >= 0, got {self.repulsion_scale}")
        if self.speed < 0:
            raise ConfigError(f"speed must be >= 0, got {self.speed}")
        if self.steps_per_frame < 0:
            raise ConfigError(f"steps_per_frame must be >= 0, got {self.steps_per_frame}")
        if self.spawn_exponent < 0:
            raise ConfigError(f"spawn_exponent must be >= 0, got {self.spawn_exponent}")


@dataclass(frozen=True)
class CanvasConfig:
    width: float = 500.0
    height: float = 500.0
    padding_factor: float = 0.2

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(
                f"Canvas must have a positive size, got {self.width}x{self.height}"
            )
        if not 0.0 <= self.padding_factor < 1.0:
            raise ConfigError(
                f"padding_factor must be in [0, 1), got {self.padding_factor}"
            )

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)


@dataclass(frozen=True)
class NodeStyle:
    """Screen-space node sizing (diameters in pixels)."""

    node_size: float = 20.0
    degree_scaler: float = 5.0
    border_size: float = 2.0
    render_borders: bool = True

    def __post_init__(self) -> None:
        if self.node_size < 0 or self.degree_scaler < 0 or self.border_size < 0:
            raise ConfigError("Node sizes must be non-negative")


@dataclass(frozen=True)
class FanConfig:
    """Spread of parallel-edge curves: ``base_shift + k * shift_per_edge``."""

    base_shift: float = 10.0
    shift_per_edge: float = 5.0


@dataclass(frozen=True)
class LayoutConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    nodes: NodeStyle = field(default_factory=NodeStyle)
    fan: FanConfig = field(default_factory=FanConfig)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict) -> "LayoutConfig":
        sections = {
            "simulation": SimulationConfig,
            "canvas": CanvasConfig,
            "nodes": NodeStyle,
            "fan": FanConfig,
        }
        unknown = set(payload) - set(sections)
        if unknown:
            raise ConfigError(f"Unknown config sections: {sorted(unknown)}")
        kwargs = {}
        for name, section_cls in sections.items():
            values = payload.get(name, {})
            allowed = {f.name for f in fields(section_cls)}
            bad = set(values) - allowed
            if bad:
                raise ConfigError(f"Unknown keys in [{name}]: {sorted(bad)}")
            kwargs[name] = section_cls(**values)
        return cls(**kwargs)


def load_config(path: PathLike) -> LayoutConfig:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return LayoutConfig.from_dict(data)


def save_config(config: LayoutConfig, path: PathLike) -> None:
    Path(path).write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
