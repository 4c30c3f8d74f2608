#!/usr/bin/env python3
"""
Evaluate a test design grid and write the summary report.

Creates artifacts/designs/<design_id>/grid.csv and design_summary.html.
"""

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Minimum detectable lift for a grid of test designs.")
    ap.add_argument("--config", help="JSON file of DesignConfig overrides")
    ap.add_argument("--audience-sizes", type=int, nargs="+")
    ap.add_argument("--test-proportions", type=float, nargs="+")
    ap.add_argument("--baseline-rates", type=float, nargs="+")
    ap.add_argument("--alpha", type=float, help="Significance level")
    ap.add_argument("--power", type=float)
    ap.add_argument("--alternative", choices=["greater", "less", "two-sided"])
    ap.add_argument("--n-jobs", type=int)
    ap.add_argument("--fail-fast", action="store_true")
    ap.add_argument("--design-id", default="design_grid")
    ap.add_argument("--artifacts-dir", default=str(ROOT / "artifacts" / "designs"))
    return ap.parse_args(argv)


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    args = parse_args(argv)

    from src.lift_planner.config import DesignConfig, load_config
    from src.lift_planner.grid import DesignGrid, evaluate_grid
    from src.lift_planner.report import render_design_summary

    config = load_config(args.config) if args.config else DesignConfig()
    overrides = {
        "audience_sizes": args.audience_sizes,
        "test_proportions": args.test_proportions,
        "baseline_rates": args.baseline_rates,
        "significance_level": args.alpha,
        "power": args.power,
        "alternative": args.alternative,
        "n_jobs": args.n_jobs,
    }
    values = config.to_dict()
    values.update({k: v for k, v in overrides.items() if v is not None})
    values["h_bounds"] = tuple(values["h_bounds"])
    if args.fail_fast:
        values["fail_fast"] = True
    config = DesignConfig(**values)

    grid = DesignGrid.from_config(config)
    print(f"1. Evaluating {len(grid)} designs...")
    results = evaluate_grid(grid, config)

    print("2. Rendering design summary...")
    out_path = render_design_summary(results, args.design_id, artifacts_dir=args.artifacts_dir, config=config)

    n_failed = sum(1 for r in results if not r.ok)
    print(f"\n[OK] {len(results) - n_failed} designs evaluated, {n_failed} failed. Summary: {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
