"""Tests for project save/load functionality."""

import json
from unittest.mock import patch

import pytest

from core.project import (
    ProjectLoadError,
    ProjectSaveError,
    _validate_project_structure,
    load_project,
    save_project,
)
from core.project_state import LogOutcome, SetSegmentIntensity, UpdateExecution, reduce_project
from models.production import OutcomeLog
from models.project import SCHEMA_VERSION


class TestSaveLoad:
    """Round trips through the JSON file."""

    def test_unlocked_round_trip(self, tmp_path, empty_project):
        path = save_project(tmp_path / "plan.json", empty_project)
        assert load_project(path) == empty_project

    def test_locked_round_trip(self, tmp_path, locked_project):
        project = reduce_project(locked_project, UpdateExecution(SetSegmentIntensity(2, "HIGH")))
        project = reduce_project(project, LogOutcome(OutcomeLog(
            posted=True,
            platform="TikTok",
            retention_3s=48.0,
            user_confidence=3,
            logged_at="2026-01-02T09:00:00",
            drop_off_timestamp="0:07",
        )))
        path = tmp_path / "plan.json"
        save_project(path, project)
        assert load_project(path) == project

    def test_file_shape(self, tmp_path, locked_project):
        path = tmp_path / "plan.json"
        save_project(path, locked_project)
        data = json.loads(path.read_text())

        assert set(data) == {"meta", "layers"}
        assert data["meta"]["version"] == SCHEMA_VERSION
        assert set(data["layers"]) == {"blueprint", "execution", "validation", "outcome"}
        assert data["layers"]["outcome"] is None
        execution = data["layers"]["execution"]
        assert execution["audio_plan"]["bpm"] == 120
        assert len(execution["edit_rhythm"]["segments"]) == 5
        assert execution["visual_density"][0] == {"time_range": "0-3", "intensity": "MED"}

    def test_save_creates_parent_dirs(self, tmp_path, empty_project):
        path = tmp_path / "nested" / "dir" / "plan.json"
        save_project(path, empty_project)
        assert path.exists()

    def test_save_leaves_no_temp_files(self, tmp_path, empty_project):
        save_project(tmp_path / "plan.json", empty_project)
        assert [p.name for p in tmp_path.iterdir()] == ["plan.json"]

    def test_save_failure_raises(self, tmp_path, empty_project):
        with patch("core.project.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(ProjectSaveError, match="disk full"):
                save_project(tmp_path / "plan.json", empty_project)
        assert not (tmp_path / "plan.json").exists()


class TestLoadErrors:
    """Bad files raise ProjectLoadError."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectLoadError, match="Failed to read"):
            load_project(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ProjectLoadError, match="Invalid JSON"):
            load_project(path)

    def test_partial_lock_rejected(self, tmp_path, locked_project):
        data = locked_project.to_dict()
        data["layers"]["validation"] = None
        path = tmp_path / "partial.json"
        path.write_text(json.dumps(data))
        with pytest.raises(ProjectLoadError, match="all set or all null"):
            load_project(path)

    def test_newer_version_warns(self, tmp_path, empty_project, caplog):
        data = empty_project.to_dict()
        data["meta"]["version"] = "9.0.0"
        path = tmp_path / "future.json"
        path.write_text(json.dumps(data))
        project = load_project(path)
        assert project.meta.version == "9.0.0"
        assert "newer than supported" in caplog.text


class TestValidateStructure:
    """Tests for _validate_project_structure."""

    def test_valid(self, empty_project):
        assert _validate_project_structure(empty_project.to_dict()) == []

    def test_not_an_object(self):
        assert _validate_project_structure([]) == ["Project file must be a JSON object"]

    def test_missing_sections(self):
        errors = _validate_project_structure({})
        assert "Missing required object: meta" in errors
        assert "Missing required object: layers" in errors

    def test_missing_version(self, empty_project):
        data = empty_project.to_dict()
        del data["meta"]["version"]
        assert _validate_project_structure(data) == ["Missing required field: meta.version"]

    def test_layer_must_be_object(self, empty_project):
        data = empty_project.to_dict()
        data["layers"]["outcome"] = "great"
        assert _validate_project_structure(data) == [
            "Field 'layers.outcome' must be an object or null"
        ]
