"""Integer partitioning of a duration across structure segments.

Uses the Largest Remainder Method so whole-second durations always sum
to the requested total. Plain rounding drifts and must not be used here.
"""

import logging
from typing import Optional

from core.constants import HOOK_MAX_SECONDS, SHORT_FORM_PLATFORMS
from models.structure import StructureTemplate
from models.timeline import CalculatedSegment

logger = logging.getLogger(__name__)


def _apportion(total_seconds: int, structure: StructureTemplate) -> list[int]:
    """Split total_seconds by base percentage, largest remainders first.

    divmod keeps the integer part and the remainder exact (remainders are
    in hundredths of a second), so no float error can leak into the result.
    """
    parts = [divmod(seg.base_percentage * total_seconds, 100) for seg in structure.segments]
    durations = [int(integer) for integer, _ in parts]

    deficit = total_seconds - sum(durations)

    # sorted() is stable: equal remainders keep template order
    by_remainder = sorted(range(len(parts)), key=lambda i: parts[i][1], reverse=True)
    for index in by_remainder[:deficit]:
        durations[index] += 1

    return durations


def _clamp_hook(durations: list[int], structure: StructureTemplate) -> None:
    """Cap a short-form HOOK at HOOK_MAX_SECONDS, moving the surplus.

    The surplus goes to the first BUILD segment. Without a BUILD it goes
    to the segment right after the HOOK; a HOOK at the very end is left
    alone. Either way the total is unchanged.
    """
    types = [seg.type for seg in structure.segments]
    if "HOOK" not in types:
        return

    hook_index = types.index("HOOK")
    surplus = durations[hook_index] - HOOK_MAX_SECONDS
    if surplus <= 0:
        return

    if "BUILD" in types:
        receiver = types.index("BUILD")
    elif hook_index + 1 < len(types):
        receiver = hook_index + 1
        logger.debug(
            f"No BUILD segment in '{structure.id}', moving {surplus}s of hook "
            f"to {types[receiver]} instead"
        )
    else:
        logger.debug(f"Hook is the last segment of '{structure.id}', not clamping")
        return

    durations[hook_index] = HOOK_MAX_SECONDS
    durations[receiver] += surplus


def calculate_timeline(
    total_seconds: int,
    structure: StructureTemplate,
    platform: Optional[str] = None,
) -> list[CalculatedSegment]:
    """Calculate a timeline of segments with exact integer durations.

    Args:
        total_seconds: Target duration in whole seconds
        structure: Template to partition
        platform: Optional target platform; short-form platforms get the
            hook clamp

    Returns:
        Segments in template order, contiguous, summing to total_seconds

    Raises:
        ValueError: If total_seconds is negative
    """
    if total_seconds < 0:
        raise ValueError(f"total_seconds must be non-negative, got {total_seconds}")

    durations = _apportion(total_seconds, structure)

    # Runs after apportioning so the total is already exact
    if platform in SHORT_FORM_PLATFORMS:
        _clamp_hook(durations, structure)

    timeline = []
    current_time = 0
    for seg, duration in zip(structure.segments, durations):
        timeline.append(
            CalculatedSegment(
                type=seg.type,
                base_percentage=seg.base_percentage,
                cut_speed_guidance=seg.cut_speed_guidance,
                sound_density=seg.sound_density,
                duration=duration,
                start_time=current_time,
                end_time=current_time + duration,
            )
        )
        current_time += duration

    return timeline


def validate_timeline_sum(segments: list[CalculatedSegment], expected_total: int) -> bool:
    """Check that segment durations add up to the expected total."""
    return sum(seg.duration for seg in segments) == expected_total


def format_timeline(segments: list[CalculatedSegment]) -> str:
    """Format a timeline as a boxed text table for display or logging."""
    width = 61
    lines = [
        f"  [{i + 1}] {seg.type:<8} | {seg.duration:>3}s | "
        f"{seg.start_time:>3}s → {seg.end_time:>3}s | "
        f"{seg.cut_speed_guidance} | {seg.sound_density}"
        for i, seg in enumerate(segments)
    ]
    total = sum(seg.duration for seg in segments)
    rule = "─" * width

    return "\n".join([
        f"┌{rule}┐",
        f"│{'CALCULATED TIMELINE':^{width}}│",
        f"├{rule}┤",
        f"│{'  #   Type     │ Dur  │ Time Range  │ Speed    │ Density':<{width}}│",
        f"├{rule}┤",
        *lines,
        f"├{rule}┤",
        f"│{f'  TOTAL: {total}s':<{width}}│",
        f"└{rule}┘",
    ])
