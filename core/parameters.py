"""Input boundary: normalize user parameters before they reach the engines.

Durations are clamped, structure ids fall back to a known default, and
platform names are canonicalized. The engines assume these checks have
already happened.
"""

import logging
from dataclasses import dataclass

from core.constants import (
    DEFAULT_DURATION_SECONDS,
    DEFAULT_PLATFORM,
    DEFAULT_STRUCTURE_ID,
    MAX_DURATION_SECONDS,
    MIN_DURATION_SECONDS,
    PLATFORMS,
)
from core.structures import get_structure_by_id
from models.structure import StructureTemplate

logger = logging.getLogger(__name__)

_PLATFORMS_BY_LOWER = {p.lower(): p for p in PLATFORMS}


@dataclass(frozen=True)
class ResonanceParameters:
    """Normalized phase-1 inputs."""

    duration: int = DEFAULT_DURATION_SECONDS
    structure_id: str = DEFAULT_STRUCTURE_ID
    platform: str = DEFAULT_PLATFORM
    has_dialogue: bool = False

    @property
    def structure(self) -> StructureTemplate:
        """The catalog template for structure_id."""
        return get_structure_by_id(self.structure_id)

    def to_dict(self) -> dict:
        return {
            "duration": self.duration,
            "structure_id": self.structure_id,
            "platform": self.platform,
            "has_dialogue": self.has_dialogue,
        }


def clamp_duration(seconds: int) -> int:
    """Clamp a duration into the supported range (5s-180s)."""
    return max(MIN_DURATION_SECONDS, min(MAX_DURATION_SECONDS, int(seconds)))


def canonical_platform(platform: str) -> str:
    """Map a platform name to its canonical spelling.

    Raises:
        ValueError: If the platform is not supported
    """
    canonical = _PLATFORMS_BY_LOWER.get(platform.strip().lower())
    if canonical is None:
        raise ValueError(
            f"Unknown platform '{platform}'. Must be one of: {', '.join(PLATFORMS)}"
        )
    return canonical


def normalize_parameters(
    duration: int,
    structure_id: str,
    platform: str,
    has_dialogue: bool = False,
    fallback_structure_id: str = DEFAULT_STRUCTURE_ID,
) -> tuple[ResonanceParameters, list[str]]:
    """Validate and normalize raw phase-1 inputs.

    Args:
        duration: Requested duration in seconds
        structure_id: Requested structure id (case-insensitive)
        platform: Requested platform (case-insensitive)
        has_dialogue: Whether the content has speech
        fallback_structure_id: Used when structure_id is unknown; must exist

    Returns:
        Tuple of (parameters, warnings)

    Raises:
        ValueError: If the platform or the fallback structure is unknown
    """
    warnings = []

    safe_duration = clamp_duration(duration)
    if safe_duration != duration:
        message = (
            f"Duration {duration}s is outside {MIN_DURATION_SECONDS}-{MAX_DURATION_SECONDS}s, "
            f"using {safe_duration}s"
        )
        logger.warning(message)
        warnings.append(message)

    structure = get_structure_by_id(structure_id)
    if structure is None:
        structure = get_structure_by_id(fallback_structure_id)
        if structure is None:
            raise ValueError(f"Fallback structure '{fallback_structure_id}' is not in the catalog")
        message = f"Unknown structure '{structure_id}', using '{structure.id}'"
        logger.warning(message)
        warnings.append(message)

    params = ResonanceParameters(
        duration=safe_duration,
        structure_id=structure.id,
        platform=canonical_platform(platform),
        has_dialogue=bool(has_dialogue),
    )
    return params, warnings
