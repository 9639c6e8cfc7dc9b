"""Read-only accessors over the scored metrics list.

Module: from query import available_years, available_regions, filter_by_year, find_metric
"""

from __future__ import annotations

from metrics import RegionYearMetric


def available_years(metrics: list[RegionYearMetric]) -> list[int]:
    """Years with at least one expected rate, ascending.

    A year without any expected rate had no history to benchmark against,
    so it is left out even though it has data.
    """
    return sorted({m.year for m in metrics if m.expected_rate is not None})


def available_regions(metrics: list[RegionYearMetric]) -> list[str]:
    return sorted({m.region for m in metrics})


def filter_by_year(metrics: list[RegionYearMetric], year: int) -> list[RegionYearMetric]:
    """All metrics for ``year``, in the input order."""
    return [m for m in metrics if m.year == year]


def find_metric(metrics: list[RegionYearMetric], region: str, year: int) -> RegionYearMetric | None:
    return next((m for m in metrics if m.region == region and m.year == year), None)
