"""Unit tests for CLI commands and utilities."""

import json

import pytest
from click.testing import CliRunner

from cli.main import cli, register_commands
from cli.utils.errors import ExitCode, exit_with, handle_error
from cli.utils.output import _serialize_value, output_result, output_table
from core.project import ProjectLoadError, load_project
from models.production import TimeRange


@pytest.fixture
def runner(isolated_settings):
    """CliRunner with commands registered and settings isolated."""
    register_commands()
    return CliRunner()


@pytest.fixture
def project_file(runner, tmp_path):
    path = tmp_path / "plan.json"
    result = runner.invoke(cli, ["project", "new", str(path)])
    assert result.exit_code == 0, result.output
    return path


@pytest.fixture
def locked_file(runner, project_file):
    result = runner.invoke(cli, ["project", "lock", str(project_file), "-d", "60", "-s", "surge", "-p", "TikTok"])
    assert result.exit_code == 0, result.output
    return project_file


class TestExitCodes:
    """Tests for exit code utilities."""

    def test_exit_code_values(self):
        assert ExitCode.SUCCESS == 0
        assert ExitCode.GENERAL_ERROR == 1
        assert ExitCode.USAGE_ERROR == 2
        assert ExitCode.FILE_NOT_FOUND == 3
        assert ExitCode.PROJECT_ERROR == 4
        assert ExitCode.VALIDATION_ERROR == 7
        assert ExitCode.BLOCKED == 8

    def test_exit_with_message(self):
        with pytest.raises(SystemExit) as exc_info:
            exit_with(ExitCode.GENERAL_ERROR, "Test error message")
        assert exc_info.value.code == ExitCode.GENERAL_ERROR

    def test_handle_error_mapping(self):
        cases = [
            (FileNotFoundError("missing"), ExitCode.FILE_NOT_FOUND),
            (PermissionError("denied"), ExitCode.PERMISSION_ERROR),
            (ProjectLoadError("bad file"), ExitCode.PROJECT_ERROR),
            (ValueError("bad value"), ExitCode.VALIDATION_ERROR),
            (RuntimeError("other"), ExitCode.GENERAL_ERROR),
        ]
        for error, code in cases:
            with pytest.raises(SystemExit) as exc_info:
                handle_error(error)
            assert exc_info.value.code == code


class TestOutput:
    """Tests for output formatting."""

    def test_serialize_uses_to_dict(self):
        assert _serialize_value(TimeRange(1, 2)) == {"start": 1, "end": 2}
        assert _serialize_value((1, 2)) == [1, 2]

    def test_output_result_json(self, capsys):
        output_result({"score": 90}, as_json=True)
        assert json.loads(capsys.readouterr().out) == {"score": 90}

    def test_output_result_text(self, capsys):
        output_result({"total_score": 90, "ducking": False})
        out = capsys.readouterr().out
        assert "Total Score: 90" in out
        assert "Ducking: no" in out

    def test_output_table(self, capsys):
        output_table(["ID", "NAME"], [["surge", "Surge"]])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["ID", "NAME"]
        assert lines[2].split() == ["surge", "Surge"]


class TestCatalogCommands:
    """Tests for structures and timeline commands."""

    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "structures" in result.output
        assert "timeline" in result.output
        assert "project" in result.output

    def test_structures(self, runner):
        result = runner.invoke(cli, ["structures"])
        assert result.exit_code == 0
        assert "surge" in result.output
        assert "HOOK 15%" in result.output

    def test_structures_json(self, runner):
        result = runner.invoke(cli, ["--json", "structures"])
        data = json.loads(result.output)
        assert len(data) == 7
        assert data[0]["id"] == "surge"

    def test_timeline(self, runner):
        result = runner.invoke(cli, ["timeline", "-d", "60", "-s", "surge", "-p", "TikTok"])
        assert result.exit_code == 0
        assert "TOTAL: 60s" in result.output
        assert "Quality: 100/100" in result.output

    def test_timeline_json(self, runner):
        result = runner.invoke(cli, ["--json", "timeline", "-d", "60", "-s", "surge", "-p", "tiktok"])
        data = json.loads(result.output)
        assert [s["duration"] for s in data["timeline"]] == [3, 27, 6, 15, 9]
        assert data["parameters"]["platform"] == "TikTok"

    def test_timeline_uses_settings_defaults(self, runner, isolated_settings):
        isolated_settings.write_text(json.dumps({"timeline": {"default_duration": 30}}))
        result = runner.invoke(cli, ["--json", "timeline"])
        data = json.loads(result.output)
        assert data["parameters"]["duration"] == 30
        assert data["parameters"]["structure_id"] == "surge"

    def test_timeline_shows_conflicts(self, runner):
        result = runner.invoke(cli, ["timeline", "-d", "90", "-s", "surge", "-p", "YouTube Shorts"])
        assert result.exit_code == 0
        assert "SHORTS_LIMIT" in result.output

    def test_timeline_clamps_duration(self, runner):
        result = runner.invoke(cli, ["timeline", "-d", "400"])
        assert result.exit_code == 0
        assert "using 180s" in result.output
        assert "TOTAL: 180s" in result.output

    def test_unknown_platform(self, runner):
        result = runner.invoke(cli, ["timeline", "-p", "MySpace"])
        assert result.exit_code == ExitCode.VALIDATION_ERROR


class TestProjectCommands:
    """Tests for the project command group."""

    def test_new_refuses_overwrite(self, runner, project_file):
        result = runner.invoke(cli, ["project", "new", str(project_file)])
        assert result.exit_code == ExitCode.USAGE_ERROR

    def test_lock(self, locked_file):
        project = load_project(locked_file)
        assert project.status == "LOCKED"
        assert project.layers.blueprint.platform_context.max_duration == 60

    def test_lock_blocked(self, runner, project_file):
        result = runner.invoke(cli, ["project", "lock", str(project_file), "-d", "15", "-s", "wave", "-p", "YouTube"])
        assert result.exit_code == ExitCode.BLOCKED
        assert "WAVE_COMPRESSION" in result.output
        assert load_project(project_file).status == "UNLOCKED"

    def test_lock_twice_rejected(self, runner, locked_file):
        result = runner.invoke(cli, ["project", "lock", str(locked_file)])
        assert result.exit_code == ExitCode.BLOCKED
        assert "already locked" in result.output

    def test_edits(self, runner, locked_file):
        for args in (
            ["set-bpm", str(locked_file), "128"],
            ["set-ducking", str(locked_file), "on"],
            ["set-pacing", str(locked_file), "1", "linear_accel"],
            ["set-intensity", str(locked_file), "2", "high"],
            ["set-asl", str(locked_file), "0", "1.2"],
            ["add-silence", str(locked_file), "29", "30"],
        ):
            result = runner.invoke(cli, ["project", *args])
            assert result.exit_code == 0, (args, result.output)

        execution = load_project(locked_file).layers.execution
        assert execution.audio_plan.bpm == 128
        assert execution.audio_plan.ducking_enabled is True
        assert execution.segments[1].pacing_curve == "LINEAR_ACCEL"
        assert execution.visual_density[2].intensity == "HIGH"
        assert execution.segments[0].target_asl == 1.2
        assert execution.audio_plan.silence_markers == (TimeRange(29.0, 30.0),)

    def test_invalid_edit(self, runner, locked_file):
        result = runner.invoke(cli, ["project", "set-intensity", str(locked_file), "9", "HIGH"])
        assert result.exit_code == ExitCode.BLOCKED
        assert "out of range" in result.output

    def test_edit_unlocked(self, runner, project_file):
        result = runner.invoke(cli, ["project", "set-bpm", str(project_file), "100"])
        assert result.exit_code == ExitCode.BLOCKED

    def test_validate(self, runner, locked_file):
        result = runner.invoke(cli, ["project", "validate", str(locked_file)])
        assert result.exit_code == 0
        assert "Status: WARNING" in result.output
        assert "Flatline Structure" in result.output

    def test_validate_strict_fails(self, runner, project_file):
        runner.invoke(cli, ["project", "lock", str(project_file), "-p", "YouTube"])
        result = runner.invoke(cli, ["project", "validate", str(project_file), "--strict"])
        assert result.exit_code == ExitCode.VALIDATION_ERROR

    def test_validate_json(self, runner, locked_file):
        result = runner.invoke(cli, ["--json", "project", "validate", str(locked_file)])
        data = json.loads(result.output)
        assert data["global_status"] == "WARNING"

    def test_info(self, runner, locked_file):
        result = runner.invoke(cli, ["project", "info", str(locked_file)])
        assert result.exit_code == 0
        assert "Status: LOCKED" in result.output
        assert "Surge" in result.output
        assert "INTENSITY" in result.output

    def test_info_json(self, runner, locked_file):
        result = runner.invoke(cli, ["--json", "project", "info", str(locked_file)])
        data = json.loads(result.output)
        assert data["status"] == "LOCKED"
        assert data["meta"]["version"] == "2.0.0"

    def test_info_bad_file(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[]")
        result = runner.invoke(cli, ["project", "info", str(path)])
        assert result.exit_code == ExitCode.PROJECT_ERROR

    def test_outcome_kept_on_unlock(self, runner, locked_file):
        result = runner.invoke(cli, [
            "project", "log-outcome", str(locked_file),
            "--retention", "55", "--confidence", "4", "--drop-off", "0:12",
        ])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["project", "unlock", str(locked_file)])
        assert result.exit_code == 0
        project = load_project(locked_file)
        assert project.status == "UNLOCKED"
        assert project.layers.outcome.platform == "TikTok"
        assert project.layers.outcome.drop_off_timestamp == "0:12"

    def test_unlock_clear_outcome(self, runner, locked_file):
        runner.invoke(cli, [
            "project", "log-outcome", str(locked_file), "--retention", "55", "--confidence", "4",
        ])
        result = runner.invoke(cli, ["project", "unlock", str(locked_file), "--clear-outcome"])
        assert result.exit_code == 0
        assert load_project(locked_file).layers.outcome is None

    def test_unlock_policy_from_env(self, runner, locked_file, monkeypatch):
        monkeypatch.setenv("RESONANCE_CLEAR_OUTCOME_ON_UNLOCK", "true")
        runner.invoke(cli, [
            "project", "log-outcome", str(locked_file), "--retention", "55", "--confidence", "4",
        ])
        runner.invoke(cli, ["project", "unlock", str(locked_file)])
        assert load_project(locked_file).layers.outcome is None

    def test_outcome_out_of_range(self, runner, locked_file):
        result = runner.invoke(cli, [
            "project", "log-outcome", str(locked_file), "--retention", "120", "--confidence", "4",
        ])
        assert result.exit_code == ExitCode.BLOCKED
        assert load_project(locked_file).layers.outcome is None

    def test_json_dispatch_result(self, runner, locked_file):
        result = runner.invoke(cli, ["--json", "project", "set-intensity", str(locked_file), "2", "HIGH"])
        data = json.loads(result.output)
        assert data["success"] is True
        assert data["validation_status"] == "PASS"
