"""Project state machine: lock, edit, validate, log outcome, unlock.

reduce_project is a pure function from (project, command) to a new
project. Illegal transitions and invalid edits return the input
unchanged; check_command explains why. ProjectStateMachine wraps the
reducer with a lock, observers, and dict results for tool callers.
"""

import logging
import math
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional, Union

from core.constants import (
    DEFAULT_BPM,
    DEFAULT_INTENSITY,
    DEFAULT_PACING_CURVE,
    DEFAULT_TARGET_ASL,
    FALLBACK_TARGET_ASL,
    MAX_CONFIDENCE,
    MAX_RETENTION,
    MIN_CONFIDENCE,
    MIN_RETENTION,
    PACING_CURVES,
    VISUAL_INTENSITIES,
)
from core.validation import validate_execution
from models.production import (
    AudioPlan,
    Blueprint,
    ExecutionMapping,
    ExecutionSegment,
    OutcomeLog,
    Phase1Data,
    PlatformContext,
    TimeRange,
    VisualDensityMarker,
)
from models.project import ResonanceProject

logger = logging.getLogger(__name__)


def _default_clock() -> str:
    return datetime.now().isoformat()


def _default_id_factory() -> str:
    return str(uuid.uuid4())


# --- Execution edits ---

@dataclass(frozen=True)
class SetBpm:
    bpm: float


@dataclass(frozen=True)
class SetDuckingEnabled:
    enabled: bool


@dataclass(frozen=True)
class SetSegmentPacing:
    index: int
    pacing_curve: str


@dataclass(frozen=True)
class SetSegmentIntensity:
    index: int
    intensity: str


@dataclass(frozen=True)
class SetSegmentTargetASL:
    index: int
    target_asl: float


@dataclass(frozen=True)
class AddSilenceMarker:
    start: float
    end: float


ExecutionEdit = Union[
    SetBpm,
    SetDuckingEnabled,
    SetSegmentPacing,
    SetSegmentIntensity,
    SetSegmentTargetASL,
    AddSilenceMarker,
]


# --- Commands ---

@dataclass(frozen=True)
class LockBlueprint:
    """Freeze a phase-1 timeline and start an execution plan."""

    phase1_data: Phase1Data
    platform_context: PlatformContext


@dataclass(frozen=True)
class UpdateExecution:
    """Apply one edit to the execution mapping."""

    edit: ExecutionEdit


@dataclass(frozen=True)
class RunValidation:
    """Recompute the validation report."""


@dataclass(frozen=True)
class LogOutcome:
    """Record how the published video performed."""

    outcome: OutcomeLog


@dataclass(frozen=True)
class UnlockBlueprint:
    """Discard the blueprint, execution, and validation layers."""


Command = Union[LockBlueprint, UpdateExecution, RunValidation, LogOutcome, UnlockBlueprint]

# Event names passed to observers
_EVENT_NAMES = {
    LockBlueprint: "locked",
    UpdateExecution: "execution_updated",
    RunValidation: "validated",
    LogOutcome: "outcome_logged",
    UnlockBlueprint: "unlocked",
}


def initialize_execution(phase1_data: Phase1Data) -> ExecutionMapping:
    """Build the starting execution mapping for a locked timeline."""
    segments = []
    markers = []
    for seg in phase1_data.timeline:
        segments.append(ExecutionSegment(
            type=seg.type,
            base_percentage=seg.base_percentage,
            cut_speed_guidance=seg.cut_speed_guidance,
            sound_density=seg.sound_density,
            duration=seg.duration,
            start_time=seg.start_time,
            end_time=seg.end_time,
            target_asl=DEFAULT_TARGET_ASL.get(seg.type, FALLBACK_TARGET_ASL),
            pacing_curve=DEFAULT_PACING_CURVE,
        ))
        markers.append(VisualDensityMarker(
            time_range=f"{seg.start_time}-{seg.end_time}",
            intensity=DEFAULT_INTENSITY,
        ))

    return ExecutionMapping(
        audio_plan=AudioPlan(bpm=DEFAULT_BPM, silence_markers=(), ducking_enabled=False),
        segments=tuple(segments),
        visual_density=tuple(markers),
    )


def _is_positive_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value > 0
    )


def _segment_index_error(execution: ExecutionMapping, index) -> Optional[str]:
    if isinstance(index, bool) or not isinstance(index, int):
        return f"Segment index must be an integer, got {index!r}"
    if not 0 <= index < len(execution.segments):
        return f"Segment index {index} out of range (0-{len(execution.segments) - 1})"
    return None


def _edit_error(project: ResonanceProject, edit: ExecutionEdit) -> Optional[str]:
    """Why an edit cannot apply to the current execution, or None."""
    execution = project.layers.execution

    if isinstance(edit, SetBpm):
        if not _is_positive_number(edit.bpm):
            return f"BPM must be a positive number, got {edit.bpm!r}"
    elif isinstance(edit, SetDuckingEnabled):
        if not isinstance(edit.enabled, bool):
            return f"Ducking must be true or false, got {edit.enabled!r}"
    elif isinstance(edit, SetSegmentPacing):
        if error := _segment_index_error(execution, edit.index):
            return error
        if edit.pacing_curve not in PACING_CURVES:
            return f"Unknown pacing curve '{edit.pacing_curve}'. Must be one of: {', '.join(PACING_CURVES)}"
    elif isinstance(edit, SetSegmentIntensity):
        if error := _segment_index_error(execution, edit.index):
            return error
        if edit.intensity not in VISUAL_INTENSITIES:
            return f"Unknown intensity '{edit.intensity}'. Must be one of: {', '.join(VISUAL_INTENSITIES)}"
    elif isinstance(edit, SetSegmentTargetASL):
        if error := _segment_index_error(execution, edit.index):
            return error
        if not _is_positive_number(edit.target_asl):
            return f"Target ASL must be a positive number of seconds, got {edit.target_asl!r}"
    elif isinstance(edit, AddSilenceMarker):
        total = project.layers.blueprint.platform_context.max_duration
        valid_numbers = all(
            isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
            for v in (edit.start, edit.end)
        )
        if not valid_numbers or not 0 <= edit.start < edit.end <= total:
            return f"Silence marker must satisfy 0 <= start < end <= {total}, got {edit.start!r}-{edit.end!r}"
    else:
        return f"Unknown execution edit: {type(edit).__name__}"
    return None


def _outcome_error(outcome: OutcomeLog) -> Optional[str]:
    retention = outcome.retention_3s
    if (
        isinstance(retention, bool)
        or not isinstance(retention, (int, float))
        or not math.isfinite(retention)
        or not MIN_RETENTION <= retention <= MAX_RETENTION
    ):
        return f"3s retention must be between {MIN_RETENTION} and {MAX_RETENTION}, got {retention!r}"

    confidence = outcome.user_confidence
    if (
        isinstance(confidence, bool)
        or not isinstance(confidence, int)
        or not MIN_CONFIDENCE <= confidence <= MAX_CONFIDENCE
    ):
        return f"Confidence must be an integer {MIN_CONFIDENCE}-{MAX_CONFIDENCE}, got {confidence!r}"

    if not isinstance(outcome.posted, bool):
        return f"Posted must be true or false, got {outcome.posted!r}"
    return None


def check_command(project: ResonanceProject, command: Command) -> Optional[str]:
    """Explain why a command would leave the project unchanged.

    Returns:
        Human-readable reason, or None if the command applies
    """
    locked = project.layers.is_locked

    if isinstance(command, LockBlueprint):
        if locked:
            return "Blueprint is already locked. Unlock it before locking a new timeline."
        if not command.phase1_data.timeline:
            return "Cannot lock an empty timeline."
        return None
    if isinstance(command, UpdateExecution):
        if not locked:
            return "No locked blueprint. Lock a timeline before editing the execution plan."
        return _edit_error(project, command.edit)
    if isinstance(command, RunValidation):
        if not locked:
            return "No locked blueprint to validate."
        return None
    if isinstance(command, LogOutcome):
        return _outcome_error(command.outcome)
    if isinstance(command, UnlockBlueprint):
        if not locked:
            return "Blueprint is not locked."
        return None
    return f"Unknown command: {type(command).__name__}"


def _apply_edit(execution: ExecutionMapping, edit: ExecutionEdit) -> ExecutionMapping:
    """Return a new execution mapping with a validated edit applied."""
    if isinstance(edit, SetBpm):
        return replace(execution, audio_plan=replace(execution.audio_plan, bpm=edit.bpm))

    if isinstance(edit, SetDuckingEnabled):
        return replace(
            execution,
            audio_plan=replace(execution.audio_plan, ducking_enabled=edit.enabled),
        )

    if isinstance(edit, AddSilenceMarker):
        markers = execution.audio_plan.silence_markers + (TimeRange(edit.start, edit.end),)
        return replace(
            execution,
            audio_plan=replace(execution.audio_plan, silence_markers=markers),
        )

    if isinstance(edit, SetSegmentIntensity):
        density = list(execution.visual_density)
        density[edit.index] = replace(density[edit.index], intensity=edit.intensity)
        return replace(execution, visual_density=tuple(density))

    segments = list(execution.segments)
    if isinstance(edit, SetSegmentPacing):
        segments[edit.index] = replace(segments[edit.index], pacing_curve=edit.pacing_curve)
    else:
        segments[edit.index] = replace(segments[edit.index], target_asl=edit.target_asl)
    return replace(execution, segments=tuple(segments))


def _revalidate(project: ResonanceProject, execution: ExecutionMapping) -> ResonanceProject:
    report = validate_execution(execution, project.layers.blueprint.platform_context)
    return replace(
        project,
        layers=replace(project.layers, execution=execution, validation=report),
    )


def reduce_project(
    project: ResonanceProject,
    command: Command,
    *,
    clock: Callable[[], str] = _default_clock,
    id_factory: Callable[[], str] = _default_id_factory,
    clear_outcome_on_unlock: bool = False,
) -> ResonanceProject:
    """Apply a command to a project.

    Never raises for an illegal transition or invalid value: the input
    project is returned unchanged and check_command gives the reason.

    Args:
        project: Current project value
        command: Command to apply
        clock: Returns the ISO timestamp for new blueprints
        id_factory: Returns the id for new blueprints
        clear_outcome_on_unlock: Drop the outcome log when unlocking

    Returns:
        New project value, or the same object if nothing changed
    """
    reason = check_command(project, command)
    if reason is not None:
        logger.debug(f"Ignoring {type(command).__name__}: {reason}")
        return project

    if isinstance(command, LockBlueprint):
        blueprint = Blueprint(
            id=id_factory(),
            timestamp=clock(),
            platform_context=command.platform_context,
            phase1_data=command.phase1_data,
        )
        execution = initialize_execution(command.phase1_data)
        report = validate_execution(execution, command.platform_context)
        logger.info(f"Locked blueprint {blueprint.id} ({len(execution.segments)} segments)")
        return replace(
            project,
            layers=replace(
                project.layers,
                blueprint=blueprint,
                execution=execution,
                validation=report,
            ),
        )

    if isinstance(command, UpdateExecution):
        execution = _apply_edit(project.layers.execution, command.edit)
        return _revalidate(project, execution)

    if isinstance(command, RunValidation):
        return _revalidate(project, project.layers.execution)

    if isinstance(command, LogOutcome):
        return replace(project, layers=replace(project.layers, outcome=command.outcome))

    # UnlockBlueprint
    outcome = None if clear_outcome_on_unlock else project.layers.outcome
    logger.info(f"Unlocked blueprint {project.layers.blueprint.id}")
    return replace(
        project,
        layers=replace(
            project.layers,
            blueprint=None,
            execution=None,
            validation=None,
            outcome=outcome,
        ),
    )


class ProjectStateMachine:
    """Single-writer owner of a project value.

    dispatch() applies one command at a time and reports the result as a
    dict. Observers are called with (event_name, project) after every
    state change, outside the lock.
    """

    def __init__(
        self,
        project: Optional[ResonanceProject] = None,
        clock: Callable[[], str] = _default_clock,
        id_factory: Callable[[], str] = _default_id_factory,
        clear_outcome_on_unlock: bool = False,
    ):
        self._project = project if project is not None else ResonanceProject()
        self._clock = clock
        self._id_factory = id_factory
        self._clear_outcome_on_unlock = clear_outcome_on_unlock
        self._lock = threading.Lock()
        self._observers: list[Callable[[str, ResonanceProject], None]] = []

    @property
    def project(self) -> ResonanceProject:
        return self._project

    @property
    def status(self) -> str:
        return self._project.status

    def subscribe(self, observer: Callable[[str, ResonanceProject], None]) -> None:
        """Register an observer for state changes."""
        self._observers.append(observer)

    def unsubscribe(self, observer: Callable[[str, ResonanceProject], None]) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def dispatch(self, command: Command) -> dict:
        """Apply a command.

        Returns:
            Dict with success, changed, status, and message or error
        """
        with self._lock:
            reason = check_command(self._project, command)
            if reason is not None:
                return {
                    "success": False,
                    "changed": False,
                    "status": self._project.status,
                    "error": reason,
                }

            updated = reduce_project(
                self._project,
                command,
                clock=self._clock,
                id_factory=self._id_factory,
                clear_outcome_on_unlock=self._clear_outcome_on_unlock,
            )
            changed = updated != self._project
            self._project = updated

        event = _EVENT_NAMES[type(command)]
        if changed:
            self._notify(event, updated)

        result = {
            "success": True,
            "changed": changed,
            "status": updated.status,
            "message": f"{type(command).__name__} applied",
        }
        if updated.layers.validation is not None:
            result["validation_status"] = updated.layers.validation.global_status
        return result

    def commit(self, planning_result) -> dict:
        """Lock the timeline from a planning result.

        Refuses plans with a blocking conflict.

        Args:
            planning_result: PlanningResult from plan_timeline

        Returns:
            Dispatch result dict
        """
        from core.planner import build_phase1_data, build_platform_context

        if planning_result.is_blocked:
            codes = ", ".join(c.code for c in planning_result.conflicts if c.is_blocking)
            return {
                "success": False,
                "changed": False,
                "status": self._project.status,
                "error": f"Cannot lock: blocking conflict ({codes})",
            }

        return self.dispatch(LockBlueprint(
            phase1_data=build_phase1_data(planning_result),
            platform_context=build_platform_context(planning_result.parameters),
        ))

    def _notify(self, event: str, project: ResonanceProject) -> None:
        for observer in list(self._observers):
            try:
                observer(event, project)
            except Exception as e:
                logger.error(f"Observer failed on '{event}': {e}")
