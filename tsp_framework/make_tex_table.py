#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Convert results.csv into LaTeX table rows grouped by map label.
----------------------------------------------------------------
Repeats of the same (map, method) are averaged.

Usage:
    python -m tsp_framework.make_tex_table --csv results.csv --out results_rows.tex

Import:
    from tsp_framework.make_tex_table import make_latex_rows
    tex_str = make_latex_rows("results.csv", "results_rows.tex")
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional

import pandas as pd

REQUIRED_COLUMNS = ("map", "method", "L_total", "elapsed_ms", "iterations")


def _fmt(v, ndigits=2) -> str:
    if v is None or pd.isna(v):
        return r"--"
    f = float(v)
    s = f"{f:.{ndigits}f}".rstrip("0").rstrip(".")
    return s if s not in ("", "-0") else "0"


def _latex_escape(s: str) -> str:
    repl = {
        '_': r'\_',
        '%': r'\%',
        '#': r'\#',
        '&': r'\&',
        '{': r'\{',
        '}': r'\}',
        '$': r'\$',
        '~': r'\textasciitilde{}',
        '^': r'\^{}',
        '\\': r'\textbackslash{}',
    }
    return "".join(repl.get(ch, ch) for ch in s)


def make_latex_rows(csv_path: str, out_path: Optional[str] = None) -> str:
    df = pd.read_csv(csv_path)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing columns: {missing}")

    summary = (df.groupby(["map", "method"], sort=True)[["L_total", "elapsed_ms", "iterations"]]
                 .mean()
                 .reset_index())

    lines = []
    for label, block in summary.groupby("map", sort=True):
        first = True
        for _, row in block.iterrows():
            left = _latex_escape(str(label)) if first else "    "
            first = False
            lines.append(
                f"{left} & {_latex_escape(str(row['method']))} & {_fmt(row['L_total'], 1)} & "
                f"{_fmt(row['elapsed_ms'], 2)} & {_fmt(row['iterations'], 1)} \\\\")
        lines.append(r"\hline")

    tex = "\n".join(lines)
    if out_path:
        Path(out_path).write_text(tex, encoding="utf-8")
    return tex


if __name__ == "__main__":
    import argparse
    p = argparse.ArgumentParser(description="Convert results.csv to LaTeX rows grouped by map")
    p.add_argument("--csv", required=True)
    p.add_argument("--out", required=False)
    args = p.parse_args()
    tex = make_latex_rows(args.csv, args.out)
    print(tex)
