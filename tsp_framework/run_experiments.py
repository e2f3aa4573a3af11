# run_experiments.py
# CLI runner for the tour engine experiment harness
import argparse
import logging

from tsp_engine.logging_config import setup_logging
from tsp_framework.framework import run_from_config
from tsp_framework.make_tex_table import make_latex_rows


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run TSP construction/2-opt experiments from config")
    parser.add_argument("--config", "-c", required=True, help="Path to config JSON/YAML")
    parser.add_argument("--tex", help="Also write LaTeX table rows to this path")
    parser.add_argument("--log-file", help="Append log output to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every 2-opt pass")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    df = run_from_config(args.config)
    print(df.head())

    if args.tex:
        csv_path = df.attrs.get("output_csv")
        if not csv_path:
            parser.error("--tex needs output_csv set in the config")
        tex_str = make_latex_rows(csv_path, args.tex)
        print(tex_str)
    return df


if __name__ == "__main__":
    main()
