"""Pipeline orchestrator – runs ingest → metrics → output end-to-end.

Usage: uv run python main.py [--volumes path.csv] [--events path.csv]
                             [--threshold 0.005] [--year 2023] [--run-id ID]
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import ingest as ingest_module
import metrics as metrics_module
import output as output_module
from query import available_regions, available_years

logger = logging.getLogger(__name__)

PIPELINE_STATE_DIR = ".pipeline_state"


def _write_manifest(data: dict, pipeline_state_dir: str = PIPELINE_STATE_DIR) -> None:
    Path(pipeline_state_dir).mkdir(parents=True, exist_ok=True)
    path = Path(pipeline_state_dir) / "run_manifest.json"
    path.write_text(json.dumps(data, indent=2))


def _arg(name: str, default: str | None = None) -> str | None:
    if name in sys.argv:
        idx = sys.argv.index(name)
        if idx + 1 < len(sys.argv):
            return sys.argv[idx + 1]
    return default


def run_pipeline(
    volumes_path: str = ingest_module.DEFAULT_VOLUMES_PATH,
    events_path: str = ingest_module.DEFAULT_EVENTS_PATH,
    materiality_threshold: float = metrics_module.MATERIALITY_THRESHOLD,
    year: int | None = None,
    run_id: str | None = None,
    pipeline_state_dir: str = PIPELINE_STATE_DIR,
    output_dir: str = "output_data",
) -> dict:
    """Run all steps and return the final manifest.

    A failure to read either input file stops the run before any metrics are
    computed; the manifest records status ``LOAD_FAILED``.
    """
    if run_id is None:
        run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    logger.info("=== pipeline start  run_id=%s ===", run_id)

    # --- initial manifest ---
    manifest: dict = {
        "run_id": run_id,
        "started_at": datetime.now().isoformat(),
        "status": "started",
        "steps_completed": [],
        "input_files": [volumes_path, events_path],
        "materiality_threshold": materiality_threshold,
        "ingest": None,
        "metrics_rows": None,
        "states_with_data": None,
        "available_years": None,
        "output_files": None,
        "abort_reason": None,
    }
    _write_manifest(manifest, pipeline_state_dir)

    # -----------------------------------------------------------------------
    # Step 1 – ingest (both inputs or nothing)
    # -----------------------------------------------------------------------
    manifest["status"] = "ingesting"
    _write_manifest(manifest, pipeline_state_dir)

    try:
        volumes, events, report = ingest_module.load_inputs(volumes_path, events_path)
    except OSError as e:
        manifest["status"] = "LOAD_FAILED"
        manifest["abort_reason"] = f"Failed to load input data: {e}"
        _write_manifest(manifest, pipeline_state_dir)
        logger.error("=== pipeline LOAD_FAILED: %s ===", e)
        return manifest

    manifest["steps_completed"].append("ingest")
    manifest["ingest"] = report.model_dump()

    # -----------------------------------------------------------------------
    # Step 2 – metrics
    # -----------------------------------------------------------------------
    manifest["status"] = "computing"
    _write_manifest(manifest, pipeline_state_dir)

    scored = metrics_module.transform(volumes, events, materiality_threshold=materiality_threshold)
    if not scored:
        logger.warning("metrics: data loaded but no region-year has positive volume")

    manifest["steps_completed"].append("metrics")
    manifest["metrics_rows"] = len(scored)
    manifest["states_with_data"] = len(available_regions(scored))
    manifest["available_years"] = available_years(scored)

    # -----------------------------------------------------------------------
    # Step 3 – output
    # -----------------------------------------------------------------------
    manifest["status"] = "outputting"
    _write_manifest(manifest, pipeline_state_dir)

    manifest["output_files"] = output_module.run_output(scored, run_id=run_id, year=year, output_dir=output_dir)

    manifest["steps_completed"].append("output")
    manifest["status"] = "completed"
    _write_manifest(manifest, pipeline_state_dir)

    logger.info("=== pipeline complete  run_id=%s ===", run_id)
    return manifest


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    year_arg = _arg("--year")
    manifest = run_pipeline(
        volumes_path=_arg("--volumes", ingest_module.DEFAULT_VOLUMES_PATH),
        events_path=_arg("--events", ingest_module.DEFAULT_EVENTS_PATH),
        materiality_threshold=float(_arg("--threshold", str(metrics_module.MATERIALITY_THRESHOLD))),
        year=int(year_arg) if year_arg is not None else None,
        run_id=_arg("--run-id"),
    )
    if manifest["status"] != "completed":
        sys.exit(1)


if __name__ == "__main__":
    main()
