"""Phase-1 planning: parameters in, timeline plus assessments out.

These calls are cheap and pure, so callers simply re-run plan_timeline
whenever an input changes. Nothing is cached here.
"""

import logging
from dataclasses import dataclass, field

from core.modifiers import apply_dialogue_constraints
from core.parameters import ResonanceParameters
from core.partition import calculate_timeline
from core.quality import calculate_quality
from core.rules import has_blocking_conflict, validate_configuration
from models.production import Phase1Data, PlatformContext, SafeZones
from models.structure import StructureTemplate
from models.timeline import CalculatedSegment, Conflict, QualityReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanningResult:
    """Everything the user sees before committing a timeline."""

    parameters: ResonanceParameters
    structure: StructureTemplate  # After dialogue constraints
    timeline: tuple[CalculatedSegment, ...]
    conflicts: tuple[Conflict, ...]
    quality: QualityReport
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_blocked(self) -> bool:
        """Whether a BLOCK conflict prevents locking this plan."""
        return has_blocking_conflict(list(self.conflicts))

    def to_dict(self) -> dict:
        return {
            "parameters": self.parameters.to_dict(),
            "structure": self.structure.id,
            "timeline": [seg.to_dict() for seg in self.timeline],
            "conflicts": [c.to_dict() for c in self.conflicts],
            "quality": self.quality.to_dict(),
            "blocked": self.is_blocked,
            "warnings": list(self.warnings),
        }


def plan_timeline(params: ResonanceParameters, warnings: list[str] = None) -> PlanningResult:
    """Compute the phase-1 timeline, conflicts, and quality for parameters.

    Args:
        params: Normalized parameters (see normalize_parameters)
        warnings: Boundary warnings to carry along with the result

    Returns:
        PlanningResult
    """
    structure = params.structure
    if params.has_dialogue:
        structure = apply_dialogue_constraints(structure)

    timeline = calculate_timeline(params.duration, structure, params.platform)
    # Rules look at the catalog id, not the dialogue-adjusted copy
    conflicts = validate_configuration(params.duration, params.structure_id, params.platform)
    quality = calculate_quality(timeline, params.platform)

    logger.debug(
        f"Planned {params.structure_id} {params.duration}s on {params.platform}: "
        f"score {quality.total_score}, {len(conflicts)} conflicts"
    )
    return PlanningResult(
        parameters=params,
        structure=structure,
        timeline=tuple(timeline),
        conflicts=tuple(conflicts),
        quality=quality,
        warnings=tuple(warnings or ()),
    )


def build_platform_context(params: ResonanceParameters) -> PlatformContext:
    """Platform context captured when the plan is locked."""
    return PlatformContext(
        platform_id=params.platform,
        max_duration=params.duration,
        safe_zones=SafeZones(),
    )


def build_phase1_data(result: PlanningResult) -> Phase1Data:
    """Snapshot of the structure and timeline to freeze into a blueprint."""
    return Phase1Data(structure=result.structure, timeline=result.timeline)
