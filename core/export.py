"""
Tabular Exports

pandas views of a city for analysis notebooks and CSV export:
- layout_frame: one row per placed building
- contributions_frame: per-building impact breakdown
- history_frame: one row per accepted metrics report
"""

import logging
from typing import Iterable, Optional

import pandas as pd

from core.grid import CityGrid
from core.impact import ImpactAggregator

log = logging.getLogger(__name__)

LAYOUT_COLUMNS = ["id", "name", "category", "x", "y", "rotation", "width", "depth"]


def layout_frame(grid: CityGrid) -> pd.DataFrame:
    """One row per building, in row-major order of origin."""
    rows = [instance.to_dict() for instance in grid.instances()]
    if not rows:
        return pd.DataFrame(columns=LAYOUT_COLUMNS)
    return pd.DataFrame(rows, columns=LAYOUT_COLUMNS)


def contributions_frame(grid: CityGrid, aggregator: Optional[ImpactAggregator] = None) -> pd.DataFrame:
    """Per-building contributions with the mitigation and synergy factors applied."""
    aggregator = aggregator or ImpactAggregator()
    rows = []
    for contribution in aggregator.contributions(grid):
        row = contribution.to_dict()
        building = row.pop("building")
        row["id"] = building["id"]
        row["x"] = building["x"]
        row["y"] = building["y"]
        row["neighbors"] = len(row["neighbors"])
        rows.append(row)

    df = pd.DataFrame(rows)
    if df.empty:
        return df
    leading = ["id", "x", "y"]
    return df[leading + [c for c in df.columns if c not in leading]]


def history_frame(reports: Iterable) -> pd.DataFrame:
    """
    Flatten MetricsReports into a frame indexed by generation.

    Columns are the metric fields plus score and rating.
    """
    rows = []
    for report in reports:
        row = {"generation": report.generation}
        row.update(report.metrics.to_dict())
        row["score"] = report.score
        row["rating"] = report.rating
        rows.append(row)

    if not rows:
        return pd.DataFrame()

    df = pd.DataFrame(rows).set_index("generation")
    log.debug(f"Built history frame with {len(df)} reports")
    return df
