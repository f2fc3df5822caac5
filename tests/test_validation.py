"""Tests for execution validation and frame math."""

from dataclasses import replace

import pytest

from core.audio_math import asl_to_frames, calculate_frames_per_beat, frame_drift
from core.project_state import initialize_execution
from core.validation import validate_execution
from tests.conftest import make_lock_command


def _execution(**kwargs):
    command = make_lock_command(**kwargs)
    return initialize_execution(command.phase1_data), command.platform_context


def _with_intensity(execution, index, intensity):
    density = list(execution.visual_density)
    density[index] = replace(density[index], intensity=intensity)
    return replace(execution, visual_density=tuple(density))


class TestFrameMath:
    """Tests for beat and frame helpers."""

    def test_frames_per_beat(self):
        assert calculate_frames_per_beat(120) == 15.0
        assert calculate_frames_per_beat(90) == 20.0
        assert calculate_frames_per_beat(120, fps=24) == 12.0

    def test_frames_per_beat_rejects_zero(self):
        with pytest.raises(ValueError):
            calculate_frames_per_beat(0)

    def test_asl_to_frames(self):
        assert asl_to_frames(1.5) == 45.0

    def test_frame_drift(self):
        assert frame_drift(2.0) == 0
        assert frame_drift(0.8) < 0.001
        assert frame_drift(1.01) == pytest.approx(0.3)


class TestValidateExecution:
    """Tests for the readiness checks."""

    def test_fresh_tiktok_plan_warns_flatline(self):
        """Clamped 3s hook passes; all-MED density has no peak."""
        execution, context = _execution()
        report = validate_execution(execution, context)
        assert report.global_status == "WARNING"
        assert [s.check_name for s in report.signals] == ["Peak Presence"]
        assert report.signals[0].message == "Flatline Structure: No Peak detected."

    def test_high_intensity_passes(self):
        execution, context = _execution()
        report = validate_execution(_with_intensity(execution, 2, "HIGH"), context)
        assert report.global_status == "PASS"
        assert report.signals == ()
        assert report.is_ready

    def test_long_low_motion_hook_fails(self):
        """An unclamped 9s hook at MED intensity fails."""
        execution, context = _execution(platform="YouTube")
        report = validate_execution(execution, context)
        assert report.global_status == "FAIL"
        hook = report.signals[0]
        assert hook.check_name == "Hook Integrity"
        assert hook.result == "FAIL"
        assert hook.segment_index == 0
        assert hook.message == "Hook is too long for low motion. Increase intensity to stop the scroll."

    def test_long_high_motion_hook_passes(self):
        execution, context = _execution(platform="YouTube")
        report = validate_execution(_with_intensity(execution, 0, "HIGH"), context)
        assert report.global_status == "PASS"

    def test_fail_outranks_warning(self):
        execution, context = _execution(platform="YouTube")
        report = validate_execution(execution, context)
        assert report.count("FAIL") == 1
        assert report.count("WARNING") == 1
        assert report.global_status == "FAIL"

    def test_micro_drift_is_info_only(self):
        execution, context = _execution()
        execution = _with_intensity(execution, 2, "HIGH")
        segments = list(execution.segments)
        segments[1] = replace(segments[1], target_asl=1.01)
        execution = replace(execution, segments=tuple(segments))

        report = validate_execution(execution, context)
        assert report.global_status == "PASS"
        assert len(report.signals) == 1
        signal = report.signals[0]
        assert signal.check_name == "Rhythm Integrity"
        assert signal.result == "INFO"
        assert signal.segment_index == 1
        assert signal.message == "Micro-drift detected in BUILD. Adjust BPM for perfect frame alignment."

    def test_no_hook_segment(self):
        """Structures without a HOOK skip the hook check."""
        execution, context = _execution(structure_id="resolve", platform="YouTube")
        report = validate_execution(execution, context)
        assert all(s.check_name != "Hook Integrity" for s in report.signals)

    def test_deterministic(self):
        execution, context = _execution(platform="YouTube")
        assert validate_execution(execution, context) == validate_execution(execution, context)
