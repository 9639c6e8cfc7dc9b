"""Tests for query.py – available years/regions, year filter, lookup."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from conftest import evt, vol  # noqa: E402
from metrics import transform  # noqa: E402
from query import available_regions, available_years, filter_by_year, find_metric  # noqa: E402


def _two_state_metrics():
    volumes = [
        vol("CA", 2018, 200_000), vol("AL", 2018, 100_000),
        vol("AL", 2019, 110_000), vol("AL", 2020, 120_000),
    ]
    events = [evt("AL", 2018, 750), evt("CA", 2018, 1500), evt("AL", 2019, 800), evt("AL", 2020, 900)]
    return transform(volumes, events)


class TestAvailableYears:
    def test_years_with_expected_rate(self, al_volumes, al_events):
        assert available_years(transform(al_volumes, al_events)) == [2019, 2020, 2021]

    def test_single_year_region_contributes_nothing(self):
        metrics = transform([vol("AL", 2018, 100_000)], [evt("AL", 2018, 750)])
        assert available_years(metrics) == []

    def test_distinct_and_sorted(self):
        assert available_years(_two_state_metrics()) == [2019, 2020]


class TestAvailableRegions:
    def test_sorted_distinct(self):
        assert available_regions(_two_state_metrics()) == ["AL", "CA"]

    def test_empty(self):
        assert available_regions([]) == []


class TestFilterByYear:
    def test_filters_and_keeps_order(self):
        year_2018 = filter_by_year(_two_state_metrics(), 2018)
        assert [m.region for m in year_2018] == ["AL", "CA"]
        assert all(m.year == 2018 for m in year_2018)

    def test_no_match(self):
        assert filter_by_year(_two_state_metrics(), 1999) == []


class TestFindMetric:
    def test_found(self):
        m = find_metric(_two_state_metrics(), "AL", 2019)
        assert m is not None
        assert m.volume == 110_000

    def test_missing(self):
        assert find_metric(_two_state_metrics(), "CA", 2019) is None
