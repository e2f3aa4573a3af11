# framework.py
# Experiment harness around the tour engine (TSP benchmarks).
# - Load point maps from CSV or generate them randomly
# - Run a list of solver configurations over every map
# - Compute metrics and export results

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import yaml

from tsp_engine.distance import format_distance
from tsp_engine.model import Algorithm, Point, SolveConfig, SolveResult
from tsp_engine.solver import SolveSession

logger = logging.getLogger(__name__)


@dataclass
class MapSpec:
    # one of: {"type":"csv","path":"..."} or {"type":"random","N":100,"bounds":[xmin,ymin,xmax,ymax]}
    type: str
    path: Optional[str] = None
    N: Optional[int] = None
    bounds: Optional[List[float]] = None
    min_spacing: float = 0.0
    seed: int = 42


@dataclass
class SolverSpec:
    name: str
    config: SolveConfig


@dataclass
class ExperimentSpec:
    maps: List[MapSpec]
    solvers: List[SolverSpec]
    repeats: int = 1            # seeded random solvers get seed + r on repeat r
    output_csv: str = "results.csv"


def rejection_sample_points(xmin: float, ymin: float, xmax: float, ymax: float,
                            n: int, min_spacing: float, seed: int = 0) -> List[Point]:
    """
    Uniform points in the rectangle, keeping a minimum spacing where possible.
    Spacing is a soft constraint: after max_attempts the rest are placed unchecked.
    """
    rng = np.random.default_rng(seed)
    xy: List[tuple] = []
    attempts = 0
    max_attempts = 20000

    while len(xy) < n and attempts < max_attempts:
        attempts += 1
        x = rng.uniform(xmin, xmax)
        y = rng.uniform(ymin, ymax)
        # only the last 200 placed points are checked
        ok = all((x - px) ** 2 + (y - py) ** 2 >= min_spacing ** 2 for (px, py) in xy[-200:])
        if ok:
            xy.append((x, y))

    while len(xy) < n:
        xy.append((rng.uniform(xmin, xmax), rng.uniform(ymin, ymax)))

    return [Point(float(x), float(y), f"P{i}") for i, (x, y) in enumerate(xy)]


def points_from_frame(df: pd.DataFrame) -> List[Point]:
    cols = {c.lower(): c for c in df.columns}
    if "x" in cols and "y" in cols:
        xs, ys = df[cols["x"]], df[cols["y"]]
    elif "lon" in cols and "lat" in cols:
        xs, ys = df[cols["lon"]], df[cols["lat"]]
    else:
        raise ValueError(f"map needs x/y or lat/lon columns, got {list(df.columns)}")
    labels = df[cols["label"]] if "label" in cols else pd.Series([None] * len(df))
    points = []
    for i, (x, y, label) in enumerate(zip(xs, ys, labels)):
        label = f"P{i}" if pd.isna(label) else str(label)
        points.append(Point(float(x), float(y), label))
    return points


def load_map(spec: MapSpec) -> List[Point]:
    if spec.type == "csv":
        if not spec.path:
            raise ValueError("csv map requires 'path'")
        return points_from_frame(pd.read_csv(spec.path))
    elif spec.type == "random":
        if not spec.bounds or spec.N is None:
            raise ValueError("random map requires 'bounds' and 'N'")
        xmin, ymin, xmax, ymax = spec.bounds
        return rejection_sample_points(xmin, ymin, xmax, ymax, n=spec.N,
                                       min_spacing=spec.min_spacing, seed=spec.seed)
    else:
        raise ValueError(f"unsupported map type: {spec.type}")


def map_label(spec: MapSpec, n: int) -> str:
    if spec.type == "csv":
        name = (spec.path or "").replace("\\", "/").rsplit("/", 1)[-1]
        return f"{name} (N={n})"
    return f"random_seed{spec.seed} (N={n})"


def is_valid_tour(tour: List[int], n: int) -> bool:
    return len(tour) == n and set(tour) == set(range(n))


def compute_metrics(result: SolveResult, n: int) -> Dict[str, Any]:
    return {
        "L_total": result.total_length,
        "length_label": format_distance(result.total_length, result.metric),
        "elapsed_ms": result.elapsed_ms,
        "iterations": result.iterations,
        "valid": is_valid_tour(result.tour, n),
    }


def solver_spec_from_dict(entry: Dict[str, Any]) -> SolverSpec:
    entry = dict(entry)
    name = entry.pop("name", None)
    config = SolveConfig.from_dict(entry)
    if name is None:
        name = f"{config.algorithm.value}+{config.improvement.value}"
    return SolverSpec(name=name, config=config)


def config_for_repeat(config: SolveConfig, r: int) -> SolveConfig:
    if config.algorithm is Algorithm.RANDOM and config.random_seed is not None:
        return replace(config, random_seed=config.random_seed + r)
    return config


def run_one(session: SolveSession, config: SolveConfig) -> Dict[str, Any]:
    result = session.solve(config)
    return {"method_label": result.method, **compute_metrics(result, len(session))}


def spec_from_config(cfg: Dict[str, Any]) -> ExperimentSpec:
    if "maps" not in cfg or "solvers" not in cfg:
        raise ValueError("experiment config requires 'maps' and 'solvers'")
    return ExperimentSpec(
        maps=[MapSpec(**m) for m in cfg["maps"]],
        solvers=[solver_spec_from_dict(s) for s in cfg["solvers"]],
        repeats=int(cfg.get("repeats", 1)),
        output_csv=cfg.get("output_csv", "results.csv"),
    )


def run_experiment(spec: ExperimentSpec) -> pd.DataFrame:
    rows = []
    for map_spec in spec.maps:
        points = load_map(map_spec)
        session = SolveSession(points)
        label = map_label(map_spec, len(points))
        logger.info("map %s", label)
        for solver in spec.solvers:
            for r in range(spec.repeats):
                metrics = run_one(session, config_for_repeat(solver.config, r))
                rows.append({
                    "map": label,
                    "method": solver.name,
                    "N": len(points),
                    "repeat": r,
                    **metrics,
                })
    df = pd.DataFrame(rows)
    df.attrs["output_csv"] = spec.output_csv
    if spec.output_csv:
        df.to_csv(spec.output_csv, index=False)
        logger.info("saved %d rows to %s", len(df), spec.output_csv)
    return df


def run_from_config(cfg_path: str) -> pd.DataFrame:
    return run_experiment(spec_from_config(_load_config(cfg_path)))


def _load_config(path: str) -> Dict:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.endswith(".json"):
        return json.loads(text)
    elif path.endswith(".yml") or path.endswith(".yaml"):
        return yaml.safe_load(text)
    else:
        # try JSON first
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return yaml.safe_load(text)
