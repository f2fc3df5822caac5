"""Production readiness checks for execution mappings.

The report is always rebuilt from scratch; it never patches an earlier
report. Status precedence is FAIL > WARNING > PASS, and INFO signals
never change the status.
"""

import logging

from core.audio_math import asl_to_frames, frame_drift
from core.constants import FRAME_DRIFT_TOLERANCE, HOOK_MAX_SECONDS
from models.production import ExecutionMapping, PlatformContext, ValidationReport, ValidationSignal

logger = logging.getLogger(__name__)

_STATUS_RANK = {"PASS": 0, "WARNING": 1, "FAIL": 2}


def _raise_status(current: str, candidate: str) -> str:
    """Return the more severe of two statuses."""
    return candidate if _STATUS_RANK[candidate] > _STATUS_RANK[current] else current


def _check_hook_integrity(execution: ExecutionMapping) -> list[ValidationSignal]:
    """A long hook needs high visual intensity to stop the scroll."""
    for index, seg in enumerate(execution.segments):
        if seg.type != "HOOK":
            continue
        density = execution.visual_density[index]
        if seg.duration > HOOK_MAX_SECONDS and density.intensity != "HIGH":
            return [ValidationSignal(
                check_name="Hook Integrity",
                result="FAIL",
                message="Hook is too long for low motion. Increase intensity to stop the scroll.",
                segment_index=index,
            )]
        # Only the first hook is checked
        return []
    return []


def _check_peak_presence(execution: ExecutionMapping) -> list[ValidationSignal]:
    if any(marker.intensity == "HIGH" for marker in execution.visual_density):
        return []
    return [ValidationSignal(
        check_name="Peak Presence",
        result="WARNING",
        message="Flatline Structure: No Peak detected.",
    )]


def _check_rhythm_integrity(execution: ExecutionMapping) -> list[ValidationSignal]:
    """Flag shot lengths that do not land on whole frames."""
    signals = []
    for index, seg in enumerate(execution.segments):
        if frame_drift(seg.target_asl) > FRAME_DRIFT_TOLERANCE:
            logger.debug(
                f"Segment {index} ({seg.type}) ASL {seg.target_asl}s = "
                f"{asl_to_frames(seg.target_asl):.3f} frames"
            )
            signals.append(ValidationSignal(
                check_name="Rhythm Integrity",
                result="INFO",
                message=f"Micro-drift detected in {seg.type}. Adjust BPM for perfect frame alignment.",
                segment_index=index,
            ))
    return signals


def validate_execution(
    execution: ExecutionMapping,
    platform_context: PlatformContext,
) -> ValidationReport:
    """Run every readiness check against an execution mapping.

    Args:
        execution: Current production plan
        platform_context: Platform captured in the blueprint

    Returns:
        ValidationReport with the resolved global status and all signals
    """
    signals = []
    global_status = "PASS"

    for check in (_check_hook_integrity, _check_peak_presence, _check_rhythm_integrity):
        for signal in check(execution):
            if signal.result in _STATUS_RANK:
                global_status = _raise_status(global_status, signal.result)
            signals.append(signal)

    logger.debug(
        f"Validated plan for {platform_context.platform_id}: "
        f"{global_status} ({len(signals)} signals)"
    )
    return ValidationReport(global_status=global_status, signals=tuple(signals))
