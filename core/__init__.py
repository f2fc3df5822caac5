"""Core timeline engines and project state management."""

from core.structures import (
    get_all_structures,
    get_structure_by_id,
    get_structure_by_key,
    STRUCTURE_COUNT,
)
from core.partition import calculate_timeline, format_timeline, validate_timeline_sum
from core.modifiers import apply_dialogue_constraints
from core.rules import validate_configuration, has_blocking_conflict
from core.quality import calculate_quality
from core.validation import validate_execution
from core.planner import plan_timeline, PlanningResult
from core.project_state import ProjectStateMachine, reduce_project, check_command

__all__ = [
    # Catalog
    "get_all_structures",
    "get_structure_by_id",
    "get_structure_by_key",
    "STRUCTURE_COUNT",
    # Engines
    "calculate_timeline",
    "format_timeline",
    "validate_timeline_sum",
    "apply_dialogue_constraints",
    "validate_configuration",
    "has_blocking_conflict",
    "calculate_quality",
    "validate_execution",
    # Planning and state
    "plan_timeline",
    "PlanningResult",
    "ProjectStateMachine",
    "reduce_project",
    "check_command",
]
