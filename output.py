"""Step 3 – Select and format metrics for display, emit output files.

Writes the full metrics table as CSV and, for one year, a JSON payload with
per-state values, display strings and value domains for a map/table consumer.

Module: from output import run_output
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

import states as states_module
from metrics import RegionYearMetric
from query import available_years, filter_by_year

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Metric selection
# ---------------------------------------------------------------------------

METRIC_LABELS: dict[str, str] = {
    "actual_rate": "Damage Rate (per 10,000 tickets)",
    "expected_rate": "Expected Damage Rate (per 10,000 tickets)",
    "residual": "Residual (Actual - Expected)",
    "residual_pct": "Residual %",
}

# Metrics centred on zero get a symmetric domain
_DIVERGING_METRICS: frozenset[str] = frozenset({"residual", "residual_pct"})


def metric_value(metric: RegionYearMetric, name: str) -> float | None:
    """Value of a display metric by name.  Raises KeyError for unknown names."""
    if name not in METRIC_LABELS:
        raise KeyError(f"Unknown metric {name!r}. Expected one of {sorted(METRIC_LABELS)}")
    return getattr(metric, name)


def metric_domain(metrics: list[RegionYearMetric], year: int, name: str) -> tuple[float, float] | None:
    """Value range of ``name`` across the states of ``year``.

    Residual metrics get a symmetric range around zero so that over- and
    under-performance share one scale.  None if no state has a value.
    """
    values = [v for v in (metric_value(m, name) for m in filter_by_year(metrics, year)) if v is not None]
    if not values:
        return None
    if name in _DIVERGING_METRICS:
        max_abs = max(abs(min(values)), abs(max(values)))
        return (-max_abs, max_abs)
    return (min(values), max(values))


# ---------------------------------------------------------------------------
# Display formatting
# ---------------------------------------------------------------------------


def format_count(value: float | None) -> str:
    """1234567 → '1,234,567'."""
    if value is None:
        return "N/A"
    return f"{round(value):,}"


def format_rate(value: float | None) -> str:
    """75.123 → '75.12'."""
    if value is None:
        return "N/A"
    return f"{value:.2f}"


def format_percent(value: float | None) -> str:
    """0.1333 → '13.3%'."""
    if value is None:
        return "N/A"
    return f"{value * 100:.1f}%"


def format_residual(value: float | None) -> str:
    """100.4 → '+100', -12.6 → '-13'."""
    if value is None:
        return "N/A"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.0f}"


def _display_strings(metric: RegionYearMetric) -> dict[str, str]:
    return {
        "transmissions": format_count(metric.volume),
        "actual_damages": format_count(metric.actual_events),
        "expected_damages": format_count(metric.expected_events),
        "damage_rate": format_rate(metric.actual_rate),
        "expected_rate": format_rate(metric.expected_rate),
        "residual": format_residual(metric.residual),
        "residual_pct": format_percent(metric.residual_pct),
    }


# ---------------------------------------------------------------------------
# CSV / JSON writers
# ---------------------------------------------------------------------------

METRICS_CSV_FIELDS: list[str] = [
    "state_code", "state_name", "fips_code", "year",
    "transmissions", "actual_damages", "damage_rate",
    "expected_rate", "expected_damages", "residual", "residual_pct",
]


def _fmt(value: float | None, digits: int) -> str:
    return f"{value:.{digits}f}" if value is not None else ""


def _csv_row(metric: RegionYearMetric) -> dict:
    return {
        "state_code": metric.region,
        "state_name": states_module.state_name(metric.region),
        "fips_code": states_module.STATE_FIPS.get(metric.region, ""),
        "year": metric.year,
        "transmissions": metric.volume,
        "actual_damages": metric.actual_events,
        "damage_rate": _fmt(metric.actual_rate, 4),
        "expected_rate": _fmt(metric.expected_rate, 4),
        "expected_damages": _fmt(metric.expected_events, 2),
        "residual": _fmt(metric.residual, 2),
        "residual_pct": _fmt(metric.residual_pct, 4),
    }


def _write_csv(filepath: str, rows: list[dict], fieldnames: list[str]) -> None:
    Path(filepath).parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
    logger.info("output: wrote %s (%d rows)", filepath, len(rows))


def _write_json(filepath: str, data: dict) -> None:
    Path(filepath).parent.mkdir(parents=True, exist_ok=True)
    Path(filepath).write_text(json.dumps(data, indent=2))
    logger.info("output: wrote %s", filepath)


def build_map_payload(metrics: list[RegionYearMetric], year: int) -> dict:
    """JSON-ready payload for one year: domains per metric plus one entry per state."""
    entries: list[dict] = []
    for metric in filter_by_year(metrics, year):
        entries.append({
            "state_code": metric.region,
            "state_name": states_module.state_name(metric.region),
            "fips_code": states_module.STATE_FIPS.get(metric.region),
            "values": {
                "transmissions": metric.volume,
                "actual_damages": metric.actual_events,
                "expected_damages": metric.expected_events,
                **{name: metric_value(metric, name) for name in METRIC_LABELS},
            },
            "display": _display_strings(metric),
        })

    domains: dict[str, list[float] | None] = {}
    for name in METRIC_LABELS:
        domain = metric_domain(metrics, year, name)
        domains[name] = list(domain) if domain is not None else None

    return {
        "year": year,
        "labels": METRIC_LABELS,
        "domains": domains,
        "states": entries,
    }


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def run_output(
    metrics: list[RegionYearMetric],
    run_id: str,
    year: int | None = None,
    output_dir: str = "output_data",
) -> list[str]:
    """Write the metrics CSV and the map payload for ``year``.

    ``year`` defaults to the latest year with an expected rate.  The map
    payload is skipped when there is no such year.

    Returns:
        Paths of the files written.
    """
    written: list[str] = []

    csv_path = str(Path(output_dir) / f"metrics_{run_id}.csv")
    _write_csv(csv_path, [_csv_row(m) for m in metrics], METRICS_CSV_FIELDS)
    written.append(csv_path)

    if year is None:
        years = available_years(metrics)
        if not years:
            logger.warning("output: no year has an expected rate; map payload not written")
            return written
        year = years[-1]

    json_path = str(Path(output_dir) / f"map_{year}_{run_id}.json")
    _write_json(json_path, build_map_payload(metrics, year))
    written.append(json_path)
    return written
