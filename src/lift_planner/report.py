"""
Design summary report.

Turns grid evaluations into a pandas table, lift pivots per baseline rate
and an HTML summary rendered with Jinja2. Reads finished results only.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd
from jinja2 import BaseLoader, Environment

from .config import DEFAULT_ARTIFACTS_DIR, DesignConfig
from .schema import DesignEvaluation, RowStatus

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = [
    "index",
    "audience_size",
    "test_proportion",
    "baseline_rate",
    "significance_level",
    "power",
    "alternative",
    "effect_size",
    "test_n",
    "control_n",
    "total_n",
    "test_rate",
    "lift_needed",
    "status",
    "error_type",
    "error",
]

SUMMARY_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Test design summary: {{ design_id }}</title>
<style>
  body { font-family: Helvetica, Arial, sans-serif; margin: 32px; color: #222; }
  table { border-collapse: collapse; margin: 12px 0 24px 0; }
  th, td { border: 1px solid #ccc; padding: 4px 10px; text-align: right; }
  th { background: #f3f5f7; }
  .headline { border-left: 4px solid #1a5276; padding: 8px 12px; background: #f8f9fa; }
  .failed { color: #a93226; }
</style>
</head>
<body>
<h1>Minimum detectable lift: {{ design_id }}</h1>
<p>
  Tests use the "{{ alternative }}" alternative at a significance level of
  {{ alpha }} and {{ power }} power. Each cell is the relative lift over the
  baseline response rate that the test arm must reach to be detected.
</p>
{% for section in sections %}
<h2>Baseline rate {{ section.baseline }}</h2>
{% if section.headline %}<p class="headline">{{ section.headline }}</p>{% endif %}
{{ section.table | safe }}
{% endfor %}
{% if failures %}
<h2>Designs that could not be evaluated</h2>
<ul>
{% for f in failures %}
  <li class="failed">{{ f.audience_size }} / {{ f.test_proportion }} / {{ f.baseline_rate }}: {{ f.error_type }} ({{ f.error }})</li>
{% endfor %}
</ul>
{% endif %}
</body>
</html>
"""


def to_frame(evaluations: Sequence[DesignEvaluation]) -> pd.DataFrame:
    """One row per evaluation, in evaluation order."""
    rows = [e.to_dict() for e in evaluations]
    if not rows:
        return pd.DataFrame(columns=OUTPUT_COLUMNS)
    return pd.DataFrame(rows, columns=OUTPUT_COLUMNS)


def lift_table(frame: pd.DataFrame, baseline_rate: float) -> pd.DataFrame:
    """
    Lift needed by audience size (rows) and test proportion (columns).

    Failed designs appear as NaN.
    """
    sub = frame[frame["baseline_rate"] == baseline_rate]
    return sub.pivot_table(
        index="audience_size",
        columns="test_proportion",
        values="lift_needed",
        aggfunc="first",
        dropna=False,
    )


def _headline(frame: pd.DataFrame) -> Optional[str]:
    usable = frame[frame["status"] != RowStatus.FAILED.value].dropna(subset=["lift_needed"])
    if usable.empty:
        return None
    # smallest change in either direction
    best = usable.loc[usable["lift_needed"].abs().idxmin()]
    split = best["test_proportion"]
    return (
        f"With an audience of {int(best['audience_size']):,} and a "
        f"{split:.0%}/{1 - split:.0%} test/control split, the test arm needs a "
        f"response rate of {best['test_rate']:.2%} against a {best['baseline_rate']:.0%} "
        f"baseline, a lift of roughly {best['lift_needed']:.1%}."
    )


def render_design_summary(
    evaluations: Sequence[DesignEvaluation],
    design_id: str,
    artifacts_dir: str = DEFAULT_ARTIFACTS_DIR,
    config: Optional[DesignConfig] = None,
) -> Path:
    """
    Write grid.csv and design_summary.html under artifacts_dir/design_id.

    Returns:
        Path to the rendered HTML summary
    """
    config = config or DesignConfig()
    frame = to_frame(evaluations)

    out_dir = Path(artifacts_dir) / design_id
    out_dir.mkdir(parents=True, exist_ok=True)
    frame.to_csv(out_dir / "grid.csv", index=False)

    sections: List[Dict] = []
    for baseline in pd.unique(frame["baseline_rate"]):
        table = lift_table(frame, baseline)
        sections.append({
            "baseline": f"{baseline:.0%}",
            "headline": _headline(frame[frame["baseline_rate"] == baseline]),
            "table": table.to_html(
                float_format=lambda v: f"{v:.1%}", na_rep="n/a", border=0
            ),
        })

    failures = frame[frame["status"] == RowStatus.FAILED.value].to_dict("records")

    env = Environment(loader=BaseLoader(), autoescape=True)
    html = env.from_string(SUMMARY_TEMPLATE).render(
        design_id=design_id,
        alternative=config.alternative.value,
        alpha=config.significance_level,
        power=config.power,
        sections=sections,
        failures=failures,
    )

    out_path = out_dir / "design_summary.html"
    out_path.write_text(html, encoding="utf-8")
    logger.info(f"Design summary saved to {out_path}")
    return out_path
