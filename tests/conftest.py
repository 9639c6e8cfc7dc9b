"""Shared fixtures for pipeline tests."""

import sys
from pathlib import Path

import pytest

# Ensure repo root is on sys.path so imports like `import states` work
REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from ingest import EventRecord, VolumeRecord  # noqa: E402


def vol(region: str, year: int, volume: int) -> VolumeRecord:
    return VolumeRecord(region=region, year=year, volume=volume)


def evt(region: str, year: int, event_count: int) -> EventRecord:
    return EventRecord(region=region, year=year, event_count=event_count)


@pytest.fixture
def al_volumes() -> list[VolumeRecord]:
    """Alabama, four years at 100,000 transmissions each."""
    return [vol("AL", year, 100_000) for year in (2018, 2019, 2020, 2021)]


@pytest.fixture
def al_events() -> list[EventRecord]:
    """Alabama damages giving rates 75, 80, 70, 85."""
    return [
        evt("AL", 2018, 750),
        evt("AL", 2019, 800),
        evt("AL", 2020, 700),
        evt("AL", 2021, 850),
    ]


@pytest.fixture
def input_files(tmp_path: Path) -> dict[str, str]:
    """Transmissions and damages CSVs for two states on disk."""
    volumes = tmp_path / "cga_transmissions.csv"
    volumes.write_text(
        "state,year,transmissions\n"
        "AL,2018,100000\n"
        "AL,2019,100000\n"
        "AL,2020,100000\n"
        "CA,2019,200000\n"
        "CA,2020,200000\n"
    )
    events = tmp_path / "cga_dirt_damages.csv"
    events.write_text(
        "state,year,total_damages\n"
        "AL,2018,750\n"
        "AL,2019,800\n"
        "AL,2020,700\n"
        "CA,2019,1500\n"
        "CA,2020,1700\n"
    )
    return {"volumes": str(volumes), "events": str(events)}
