"""Step 1 – Read and parse the transmissions and damages CSVs.

Standalone: python ingest.py [--volumes path.csv] [--events path.csv]
Module:     from ingest import load_inputs
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

import states as states_module

# ---------------------------------------------------------------------------
# Configuration constants (adjust as needed)
# ---------------------------------------------------------------------------

DEFAULT_VOLUMES_PATH: str = "raw_data/cga_transmissions.csv"
DEFAULT_EVENTS_PATH: str = "raw_data/cga_dirt_damages.csv"

# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


def _normalize_region(value: object) -> object:
    if isinstance(value, str):
        return value.strip().upper()
    return value


class VolumeRecord(BaseModel):
    """One region-year of 811 ticket volume (transmissions)."""
    model_config = ConfigDict(frozen=True)

    region: str
    year: int
    volume: int

    @field_validator("region", mode="before")
    @classmethod
    def normalize_region(cls, value: object) -> object:
        return _normalize_region(value)


class EventRecord(BaseModel):
    """One region-year of reported damages."""
    model_config = ConfigDict(frozen=True)

    region: str
    year: int
    event_count: int

    @field_validator("region", mode="before")
    @classmethod
    def normalize_region(cls, value: object) -> object:
        return _normalize_region(value)


class IngestReport(BaseModel):
    """Per-source row tallies for the run manifest."""
    volume_rows: int = 0
    volume_rows_skipped: int = 0
    event_rows: int = 0
    event_rows_skipped: int = 0
    unknown_regions: list[str] = []


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_volume_row(fields: list[str]) -> VolumeRecord:
    """[region, year, transmissions] → VolumeRecord.  Raises ValueError on bad ints."""
    return VolumeRecord(region=fields[0], year=int(fields[1]), volume=int(fields[2]))


def parse_event_row(fields: list[str]) -> EventRecord:
    """[region, year, total_damages] → EventRecord.  Raises ValueError on bad ints."""
    return EventRecord(region=fields[0], year=int(fields[1]), event_count=int(fields[2]))


def parse_csv(text: str, row_parser: Callable[[list[str]], T]) -> tuple[list[T], int]:
    """Parse comma-delimited text with a header line.

    Rows whose field count differs from the header's, or whose integers do not
    parse, are skipped.  Blank lines are ignored and not counted.

    Returns:
        (records, skipped_row_count)
    """
    lines = text.strip().split("\n")
    if not lines or not lines[0].strip():
        return [], 0

    n_fields = len(lines[0].split(","))
    records: list[T] = []
    skipped = 0
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        fields = line.split(",")
        if len(fields) != n_fields:
            logger.debug("Line %d: expected %d fields, got %d. Skipped.", line_no, n_fields, len(fields))
            skipped += 1
            continue
        try:
            records.append(row_parser(fields))
        except ValueError as e:
            # pydantic's ValidationError is a ValueError subclass
            logger.debug("Line %d: unparseable row — %s. Skipped.", line_no, e)
            skipped += 1
    return records, skipped


def _unknown_regions(volumes: list[VolumeRecord], events: list[EventRecord]) -> list[str]:
    regions = {r.region for r in volumes} | {r.region for r in events}
    return sorted(code for code in regions if not states_module.is_known_state(code))


# ---------------------------------------------------------------------------
# Public entry-point
# ---------------------------------------------------------------------------


def load_inputs(
    volumes_path: str = DEFAULT_VOLUMES_PATH,
    events_path: str = DEFAULT_EVENTS_PATH,
) -> tuple[list[VolumeRecord], list[EventRecord], IngestReport]:
    """Read and parse both input files.

    Both files are read before anything is parsed, so a missing or unreadable
    file raises (OSError) without producing a partial result.

    Returns:
        (volume_records, event_records, report)
    """
    logger.info("ingest: reading %s and %s", volumes_path, events_path)
    volumes_text = Path(volumes_path).read_text()
    events_text = Path(events_path).read_text()

    volumes, volumes_skipped = parse_csv(volumes_text, parse_volume_row)
    events, events_skipped = parse_csv(events_text, parse_event_row)
    logger.info("ingest: %d volume rows, %d event rows parsed", len(volumes), len(events))

    for label, skipped in (("volume", volumes_skipped), ("event", events_skipped)):
        if skipped:
            logger.warning("ingest: skipped %d malformed %s rows", skipped, label)

    unknown = _unknown_regions(volumes, events)
    if unknown:
        logger.warning("ingest: region codes not in state reference table: %s", ", ".join(unknown))

    report = IngestReport(
        volume_rows=len(volumes),
        volume_rows_skipped=volumes_skipped,
        event_rows=len(events),
        event_rows_skipped=events_skipped,
        unknown_regions=unknown,
    )
    return volumes, events, report


# ---------------------------------------------------------------------------
# Standalone entry-point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    volumes_file = DEFAULT_VOLUMES_PATH
    events_file = DEFAULT_EVENTS_PATH
    if "--volumes" in sys.argv:
        idx = sys.argv.index("--volumes")
        if idx + 1 < len(sys.argv):
            volumes_file = sys.argv[idx + 1]
    if "--events" in sys.argv:
        idx = sys.argv.index("--events")
        if idx + 1 < len(sys.argv):
            events_file = sys.argv[idx + 1]

    try:
        _, _, ingest_report = load_inputs(volumes_file, events_file)
    except OSError as e:
        logger.error("ingest: load failed — %s", e)
        sys.exit(1)
    logger.info("ingest: %s", ingest_report.model_dump_json())
