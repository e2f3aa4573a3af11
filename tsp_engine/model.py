# model.py
# Value types shared by the tour engine: points, solve configuration, events, results.

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

Tour = List[int]


class Metric(str, Enum):
    PLANAR = "planar"
    SPHERICAL = "spherical"


class Algorithm(str, Enum):
    NEAREST_NEIGHBOR = "nearest"
    CHEAPEST_INSERTION = "insertion"
    RANDOM = "random"


class Improvement(str, Enum):
    NONE = "none"
    TWO_OPT = "2opt"


_METRIC_NAMES = {
    "planar": Metric.PLANAR,
    "euclidean": Metric.PLANAR,
    "spherical": Metric.SPHERICAL,
    "haversine": Metric.SPHERICAL,
}

_ALGORITHM_NAMES = {
    "nearest": Algorithm.NEAREST_NEIGHBOR,
    "nearest_neighbor": Algorithm.NEAREST_NEIGHBOR,
    "insertion": Algorithm.CHEAPEST_INSERTION,
    "cheapest_insertion": Algorithm.CHEAPEST_INSERTION,
    "random": Algorithm.RANDOM,
}

_IMPROVEMENT_NAMES = {
    "none": Improvement.NONE,
    "2opt": Improvement.TWO_OPT,
    "two_opt": Improvement.TWO_OPT,
}


_TRUE_NAMES = {"true", "1", "yes"}
_FALSE_NAMES = {"false", "0", "no"}


def _lookup(table: Dict[str, Any], value: Any, what: str):
    enum_type = type(next(iter(table.values())))
    if isinstance(value, enum_type):
        return value
    if isinstance(value, Enum):
        raise ValueError(f"{what} must be a {enum_type.__name__}, got {value!r}")
    key = str(value).strip().lower().replace("-", "_")
    if key == "2_opt":
        key = "2opt"
    if key not in table:
        raise ValueError(f"unknown {what} '{value}' (expected one of {sorted(table)})")
    return table[key]


def _parse_bool(value: Any, what: str) -> bool:
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _TRUE_NAMES:
            return True
        if key in _FALSE_NAMES:
            return False
    elif value in (True, False):
        return bool(value)
    raise ValueError(f"{what} must be a boolean (true/false, yes/no, 1/0), got {value!r}")


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    label: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any, index: int = 0) -> "Point":
        """Normalize a host-supplied point.

        Accepts a Point, a mapping with x/y, lat/lon or latitude/longitude keys,
        or a sequence (or 1-D numpy row) whose first two items are (x, y).
        Latitude maps to y and longitude to x.
        """
        default_label = f"P{index}"
        if isinstance(value, Point):
            if value.label is None:
                return cls(value.x, value.y, default_label)
            return value
        if isinstance(value, Mapping):
            label = value.get("label")
            label = default_label if label is None else str(label)
            if "lat" in value and "lon" in value:
                return cls(float(value["lon"]), float(value["lat"]), label)
            if "latitude" in value and "longitude" in value:
                return cls(float(value["longitude"]), float(value["latitude"]), label)
            if "x" in value and "y" in value:
                return cls(float(value["x"]), float(value["y"]), label)
            raise ValueError(f"point {index}: unknown point format {dict(value)!r}")
        if isinstance(value, np.ndarray) and value.ndim == 1 and value.size >= 2:
            return cls(float(value[0]), float(value[1]), default_label)
        if isinstance(value, Sequence) and not isinstance(value, str) and len(value) >= 2:
            return cls(float(value[0]), float(value[1]), default_label)
        raise ValueError(f"point {index}: unknown point format {value!r}")


def normalize_points(values: Sequence[Any]) -> List[Point]:
    return [Point.from_value(v, i) for i, v in enumerate(values)]


@dataclass(frozen=True)
class SolveConfig:
    metric: Metric = Metric.PLANAR
    algorithm: Algorithm = Algorithm.NEAREST_NEIGHBOR
    improvement: Improvement = Improvement.TWO_OPT
    fixed_start_index: Optional[int] = None
    roundtrip: bool = False
    random_seed: Optional[int] = None

    def __post_init__(self):
        # plain names ("spherical", "2opt", ...) become enum members or fail here
        object.__setattr__(self, "metric", _lookup(_METRIC_NAMES, self.metric, "metric"))
        object.__setattr__(self, "algorithm", _lookup(_ALGORITHM_NAMES, self.algorithm, "algorithm"))
        improvement = Improvement.NONE if self.improvement is None else \
            _lookup(_IMPROVEMENT_NAMES, self.improvement, "improvement")
        object.__setattr__(self, "improvement", improvement)
        object.__setattr__(self, "roundtrip", _parse_bool(self.roundtrip, "roundtrip"))

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any]) -> "SolveConfig":
        """Build a config from plain values, e.g. a parsed YAML mapping.

        Enum fields accept their names ("nearest", "insertion", "random",
        "euclidean"/"planar", "haversine"/"spherical", "2opt", "none"). Booleans accept
        true/false, yes/no and 1/0; anything else raises ValueError.
        """
        known = {"metric", "algorithm", "improvement", "fixed_start_index", "roundtrip", "random_seed"}
        unknown = set(cfg) - known
        if unknown:
            raise ValueError(f"unknown solve config keys: {sorted(unknown)}")
        kwargs: Dict[str, Any] = {}
        for key in ("metric", "algorithm", "improvement", "roundtrip"):
            if key in cfg:
                kwargs[key] = cfg[key]
        if cfg.get("fixed_start_index") is not None:
            kwargs["fixed_start_index"] = int(cfg["fixed_start_index"])
        if cfg.get("random_seed") is not None:
            kwargs["random_seed"] = int(cfg["random_seed"])
        return cls(**kwargs)


@dataclass(frozen=True)
class ImprovementEvent:
    tour: Tour
    gain: float
    iteration: int


@dataclass
class SolveResult:
    tour: Tour
    total_length: float
    method: str
    elapsed_ms: float
    metric: Metric
    roundtrip: bool
    iterations: int = 0
    cancelled: bool = False


@dataclass
class CancellationToken:
    """Cooperative stop flag; the optimizer polls it before each pass."""
    _cancelled: bool = field(default=False, repr=False)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled
