"""Retention quality scoring for calculated timelines.

Rules:
1. Hook penalty: short-form hooks longer than 3s lose 20 points.
2. Pacing: average segment duration outside 2s-15s loses 15 points.
3. Contrast: a timeline with no HIGH/MAX sound density loses 10 points.
"""

from core.constants import HIGH_ENERGY_DENSITIES, HOOK_MAX_SECONDS, SHORT_FORM_PLATFORMS
from models.timeline import CalculatedSegment, QualityReport

MAX_SCORE = 100
HOOK_PENALTY = 20
PACING_PENALTY = 15
CONTRAST_PENALTY = 10

# Average segment duration bounds (seconds)
CHOPPY_THRESHOLD = 2.0
SLOW_THRESHOLD = 15.0


def calculate_quality(timeline: list[CalculatedSegment], platform: str) -> QualityReport:
    """Score a timeline against retention heuristics.

    Args:
        timeline: Calculated segments
        platform: Target platform

    Returns:
        QualityReport with a 0-100 score and feedback in rule order
    """
    score = MAX_SCORE
    feedback = []

    # The opening segment is the de facto hook whatever its type
    if platform in SHORT_FORM_PLATFORMS and timeline:
        hook = timeline[0]
        if hook.duration > HOOK_MAX_SECONDS:
            score -= HOOK_PENALTY
            feedback.append(
                f"Hook is {hook.duration}s. Aim for <{HOOK_MAX_SECONDS}s for retention on {platform}."
            )

    if timeline:
        avg_duration = sum(seg.duration for seg in timeline) / len(timeline)
        if avg_duration < CHOPPY_THRESHOLD:
            score -= PACING_PENALTY
            feedback.append(
                f"Pacing is too choppy (Avg: {avg_duration:.1f}s). Consolidate segments."
            )
        elif avg_duration > SLOW_THRESHOLD:
            score -= PACING_PENALTY
            feedback.append(
                f"Pacing is too slow (Avg: {avg_duration:.1f}s). Add more cuts."
            )

    if not any(seg.sound_density in HIGH_ENERGY_DENSITIES for seg in timeline):
        score -= CONTRAST_PENALTY
        feedback.append("Energy is too flat. Add a Peak or Surge segment for contrast.")

    return QualityReport(
        total_score=max(0, min(MAX_SCORE, score)),
        feedback=tuple(feedback),
    )
