"""Step 2 – Join volumes and damages, derive expected rates, compute residuals.

The expected rate for a region-year is read only from that region's earlier
years (or, with no region history at all, from the national rate of the
preceding year), so a year is never scored against its own or later data.

Module: from metrics import transform
"""

from __future__ import annotations

import logging
from collections import defaultdict

from pydantic import BaseModel, ConfigDict

from ingest import EventRecord, VolumeRecord

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration constants (adjust as needed)
# ---------------------------------------------------------------------------

RATE_SCALE: int = 10_000               # rates are damages per 10,000 transmissions
LOOKBACK_YEARS: int = 3                # prior years averaged into the expected rate
MATERIALITY_THRESHOLD: float = 0.0     # min |residual_pct| reported; 0 shows every residual

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class Benchmark(BaseModel):
    """Expected-vs-actual comparison that passed the materiality gate."""
    model_config = ConfigDict(frozen=True)

    expected_events: float
    residual: float                    # actual − expected, in damage counts
    residual_pct: float                # residual / expected_events


class RegionYearMetric(BaseModel):
    """One scored region-year.  Only created for volume > 0."""
    model_config = ConfigDict(frozen=True)

    region: str
    year: int
    volume: int
    actual_events: int
    actual_rate: float | None
    expected_rate: float | None = None
    benchmark: Benchmark | None = None

    @property
    def expected_events(self) -> float | None:
        return self.benchmark.expected_events if self.benchmark else None

    @property
    def residual(self) -> float | None:
        return self.benchmark.residual if self.benchmark else None

    @property
    def residual_pct(self) -> float | None:
        return self.benchmark.residual_pct if self.benchmark else None


RegionHistory = dict[str, list[RegionYearMetric]]

# ---------------------------------------------------------------------------
# Rates
# ---------------------------------------------------------------------------


def damage_rate(event_count: int, volume: int) -> float | None:
    """Damages per 10,000 transmissions.  None when volume is zero or negative."""
    if volume <= 0:
        return None
    return event_count * RATE_SCALE / volume


def national_baseline(volumes: list[VolumeRecord], events: list[EventRecord]) -> dict[int, float]:
    """Nationwide rate per year from raw record totals.

    Volumes and damages are summed per year independently, so a region present
    in only one source still counts toward that side's total.  Years whose
    total volume is not positive are left out.
    """
    volume_totals: dict[int, int] = defaultdict(int)
    event_totals: dict[int, int] = defaultdict(int)
    for v in volumes:
        volume_totals[v.year] += v.volume
    for e in events:
        event_totals[e.year] += e.event_count

    baseline: dict[int, float] = {}
    for year in volume_totals.keys() | event_totals.keys():
        rate = damage_rate(event_totals.get(year, 0), volume_totals.get(year, 0))
        if rate is not None:
            baseline[year] = rate
    return baseline


# ---------------------------------------------------------------------------
# Expected rate – two tiers
# ---------------------------------------------------------------------------


def _region_history_rate(history: list[RegionYearMetric], year: int) -> float | None:
    """Mean actual rate over the region's nearest LOOKBACK_YEARS years before ``year``."""
    prior = [m for m in history if m.year < year and m.actual_rate is not None]
    prior.sort(key=lambda m: m.year, reverse=True)
    window = prior[:LOOKBACK_YEARS]
    if not window:
        return None
    return sum(m.actual_rate for m in window) / len(window)  # type: ignore[misc]


def _national_fallback_rate(baseline: dict[int, float], year: int) -> float | None:
    """National rate for the year before ``year``."""
    return baseline.get(year - 1)


def expected_rate(
    region: str,
    year: int,
    history: RegionHistory,
    baseline: dict[int, float],
) -> float | None:
    """Expected rate for (region, year).

    Any region history (one to three prior years) wins; the national fallback
    is consulted only when the region has no earlier year at all.
    """
    rate = _region_history_rate(history.get(region, []), year)
    if rate is not None:
        return rate
    return _national_fallback_rate(baseline, year)


def _benchmark(
    volume: int,
    actual_events: int,
    rate: float | None,
    materiality_threshold: float,
) -> Benchmark | None:
    """Apply the materiality gate.  Returns None when nothing should be reported."""
    if rate is None or volume <= 0:
        return None
    raw_expected = volume * rate / RATE_SCALE
    if raw_expected <= 0:
        return None
    raw_residual = actual_events - raw_expected
    raw_pct = raw_residual / raw_expected
    if abs(raw_pct) < materiality_threshold:
        return None
    return Benchmark(expected_events=raw_expected, residual=raw_residual, residual_pct=raw_pct)


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def transform(
    volumes: list[VolumeRecord],
    events: list[EventRecord],
    materiality_threshold: float = MATERIALITY_THRESHOLD,
) -> list[RegionYearMetric]:
    """Join both sources and score every region-year with positive volume.

    Returns metrics sorted by region, then year.  Inputs are not modified.
    """
    # --- (region, year) lookups; later records win ---
    volume_lookup: dict[tuple[str, int], VolumeRecord] = {(v.region, v.year): v for v in volumes}
    event_lookup: dict[tuple[str, int], EventRecord] = {(e.region, e.year): e for e in events}
    keys = volume_lookup.keys() | event_lookup.keys()

    baseline = national_baseline(volumes, events)
    logger.info("metrics: national baseline covers %d years", len(baseline))

    # --- first pass: actual rates ---
    actuals: list[RegionYearMetric] = []
    history: RegionHistory = defaultdict(list)
    dropped = 0
    for region, year in keys:
        volume_record = volume_lookup.get((region, year))
        event_record = event_lookup.get((region, year))
        volume = volume_record.volume if volume_record else 0
        event_count = event_record.event_count if event_record else 0

        if volume <= 0:
            dropped += 1
            continue

        metric = RegionYearMetric(
            region=region,
            year=year,
            volume=volume,
            actual_events=event_count,
            actual_rate=damage_rate(event_count, volume),
        )
        actuals.append(metric)
        history[region].append(metric)

    if dropped:
        logger.info("metrics: dropped %d region-years without positive volume", dropped)

    for region_metrics in history.values():
        region_metrics.sort(key=lambda m: m.year)

    # --- second pass: expected rates and residuals ---
    scored: list[RegionYearMetric] = []
    suppressed = 0
    for metric in actuals:
        rate = expected_rate(metric.region, metric.year, history, baseline)
        benchmark = _benchmark(metric.volume, metric.actual_events, rate, materiality_threshold)
        if rate is not None and benchmark is None:
            suppressed += 1
        scored.append(metric.model_copy(update={"expected_rate": rate, "benchmark": benchmark}))

    scored.sort(key=lambda m: (m.region, m.year))
    logger.info(
        "metrics: %d region-years scored, %d with expected rate, %d residuals suppressed",
        len(scored),
        sum(1 for m in scored if m.expected_rate is not None),
        suppressed,
    )
    return scored
