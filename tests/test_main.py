"""Tests for main.py – end-to-end run, load failure, empty data."""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from main import run_pipeline  # noqa: E402


def _run(tmp_path: Path, volumes: str, events: str, **kwargs) -> dict:
    return run_pipeline(
        volumes_path=volumes,
        events_path=events,
        run_id="test",
        pipeline_state_dir=str(tmp_path / ".pipeline_state"),
        output_dir=str(tmp_path / "output_data"),
        **kwargs,
    )


class TestRunPipeline:
    def test_completes(self, tmp_path: Path, input_files: dict[str, str]) -> None:
        manifest = _run(tmp_path, input_files["volumes"], input_files["events"])
        assert manifest["status"] == "completed"
        assert manifest["steps_completed"] == ["ingest", "metrics", "output"]
        assert manifest["metrics_rows"] == 5
        assert manifest["states_with_data"] == 2
        assert manifest["available_years"] == [2019, 2020]
        assert (tmp_path / "output_data" / "map_2020_test.json").exists()

        on_disk = json.loads((tmp_path / ".pipeline_state" / "run_manifest.json").read_text())
        assert on_disk["status"] == "completed"

    def test_threshold_recorded(self, tmp_path: Path, input_files: dict[str, str]) -> None:
        manifest = _run(tmp_path, input_files["volumes"], input_files["events"], materiality_threshold=0.5)
        assert manifest["materiality_threshold"] == 0.5

    def test_missing_input_aborts_before_metrics(self, tmp_path: Path, input_files: dict[str, str]) -> None:
        manifest = _run(tmp_path, input_files["volumes"], str(tmp_path / "nope.csv"))
        assert manifest["status"] == "LOAD_FAILED"
        assert manifest["steps_completed"] == []
        assert manifest["metrics_rows"] is None
        assert not (tmp_path / "output_data").exists()

    def test_empty_data_is_not_a_load_failure(self, tmp_path: Path) -> None:
        volumes = tmp_path / "v.csv"
        volumes.write_text("state,year,transmissions\n")
        events = tmp_path / "e.csv"
        events.write_text("state,year,total_damages\n")
        manifest = _run(tmp_path, str(volumes), str(events))
        assert manifest["status"] == "completed"
        assert manifest["metrics_rows"] == 0
        assert manifest["available_years"] == []
        assert manifest["output_files"] == [str(tmp_path / "output_data" / "metrics_test.csv")]
