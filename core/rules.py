"""Rules engine for duration / structure / platform combinations.

Each rule is checked independently; any number of them may fire.
BLOCK conflicts must be resolved before the timeline can be locked,
WARNING conflicts are advisory.
"""

from core.constants import SEVERITY_BLOCK, SEVERITY_WARNING
from models.timeline import Conflict

# YouTube Shorts turns longer uploads into regular videos
SHORTS_MAX_SECONDS = 60

# Wave needs room for several peaks and valleys
WAVE_MIN_SECONDS = 20


def validate_configuration(duration: int, structure_id: str, platform: str) -> list[Conflict]:
    """Check a configuration against the known incompatibilities.

    Args:
        duration: Target duration in seconds
        structure_id: Structure id (case-insensitive)
        platform: Target platform name

    Returns:
        Conflicts in rule order (empty when the configuration is clean)
    """
    conflicts = []
    struct_id = structure_id.lower()

    if platform == "TikTok" and struct_id == "breathe":
        conflicts.append(Conflict(
            code="BOREDOM_PROTOCOL",
            severity=SEVERITY_WARNING,
            message="Breathe structure is high-risk on TikTok due to low retention",
            fix='Consider "Pulse" or "Surge" for better retention.',
        ))

    if platform == "YouTube Shorts" and duration > SHORTS_MAX_SECONDS:
        conflicts.append(Conflict(
            code="SHORTS_LIMIT",
            severity=SEVERITY_BLOCK,
            message=f"YouTube Shorts cannot exceed {SHORTS_MAX_SECONDS} seconds",
            fix=(
                f"Reduce duration to {SHORTS_MAX_SECONDS}s or less, "
                "or switch platform to Standard YouTube."
            ),
        ))

    if struct_id == "wave" and duration < WAVE_MIN_SECONDS:
        conflicts.append(Conflict(
            code="WAVE_COMPRESSION",
            severity=SEVERITY_BLOCK,
            message="Duration too short for complex Wave structure",
            fix=f'Increase duration to at least {WAVE_MIN_SECONDS}s or switch to "Surge".',
        ))

    return conflicts


def has_blocking_conflict(conflicts: list[Conflict]) -> bool:
    """Whether any conflict disables committing the timeline."""
    return any(c.severity == SEVERITY_BLOCK for c in conflicts)
