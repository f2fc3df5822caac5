"""Project management commands."""

from datetime import datetime
from pathlib import Path
from typing import Optional

import click

from cli.commands.timeline import resolve_parameters, timeline_options
from cli.utils.errors import ExitCode, exit_with, handle_error
from cli.utils.output import output_result, output_success, output_table, output_warning


@click.group()
def project() -> None:
    """Manage Resonance projects.

    \b
    Commands:
        new            Create an empty project file
        info           Show project layers and status
        lock           Lock a timeline and start an execution plan
        set-bpm        Set the audio plan tempo
        set-ducking    Turn music ducking on or off
        set-pacing     Set a segment's pacing curve
        set-intensity  Set a segment's visual intensity
        set-asl        Set a segment's target average shot length
        add-silence    Add a silence marker to the audio plan
        validate       Re-run the readiness checks
        log-outcome    Record how the published video performed
        unlock         Discard the blueprint and execution plan
    """
    pass


def _load(project_file: Path):
    from core.project import ProjectLoadError, load_project

    try:
        return load_project(project_file)
    except ProjectLoadError as e:
        exit_with(ExitCode.PROJECT_ERROR, f"Failed to load project: {e}")


def _save(project_file: Path, project_value) -> None:
    from core.project import ProjectSaveError, save_project

    try:
        save_project(project_file, project_value)
    except ProjectSaveError as e:
        handle_error(e)


def _apply(
    ctx: click.Context,
    project_file: Path,
    command,
    success_message: str,
    clear_outcome_on_unlock: Optional[bool] = None,
) -> None:
    """Load, dispatch one command, save, and report."""
    from core.project_state import ProjectStateMachine

    settings = ctx.obj["settings"]
    if clear_outcome_on_unlock is None:
        clear_outcome_on_unlock = settings.clear_outcome_on_unlock

    machine = ProjectStateMachine(
        _load(project_file),
        clear_outcome_on_unlock=clear_outcome_on_unlock,
    )
    result = machine.dispatch(command)
    if not result["success"]:
        exit_with(ExitCode.BLOCKED, result["error"])

    _save(project_file, machine.project)

    if ctx.obj.get("json", False):
        output_result(result, as_json=True)
        return

    output_success(success_message)
    if status := result.get("validation_status"):
        click.echo(f"Validation: {status}")


@project.command("new")
@click.argument("project_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def new(ctx: click.Context, project_file: Path, force: bool) -> None:
    """Create an empty (unlocked) project file.

    \b
    Examples:
        resonance project new plan.json
    """
    from models.project import ResonanceProject

    if project_file.exists() and not force:
        exit_with(ExitCode.USAGE_ERROR, f"{project_file} already exists (use --force to overwrite)")

    project_value = ResonanceProject()
    _save(project_file, project_value)

    if ctx.obj.get("json", False):
        output_result({"project_file": project_file, "status": project_value.status}, as_json=True)
    else:
        output_success(f"Created {project_file}")


@project.command("info")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def info(ctx: click.Context, project_file: Path) -> None:
    """Show project information.

    \b
    Examples:
        resonance project info plan.json
        resonance --json project info plan.json
    """
    project_value = _load(project_file)
    as_json = ctx.obj.get("json", False)

    if as_json:
        data = project_value.to_dict()
        data["status"] = project_value.status
        output_result(data, as_json=True)
        return

    layers = project_value.layers
    summary = {
        "status": project_value.status,
        "version": project_value.meta.version,
        "created_at": project_value.meta.created_at,
    }
    if layers.is_locked:
        blueprint = layers.blueprint
        summary.update({
            "blueprint_id": blueprint.id,
            "locked_at": blueprint.timestamp,
            "structure": blueprint.phase1_data.structure.name,
            "platform": blueprint.platform_context.platform_id,
            "duration": f"{blueprint.platform_context.max_duration}s",
            "bpm": layers.execution.audio_plan.bpm,
            "ducking": layers.execution.audio_plan.ducking_enabled,
            "silence_markers": len(layers.execution.audio_plan.silence_markers),
            "validation": layers.validation.global_status,
        })
    if layers.outcome:
        summary["outcome"] = (
            f"{'posted' if layers.outcome.posted else 'not posted'} on {layers.outcome.platform}, "
            f"{layers.outcome.retention_3s}% at 3s, confidence {layers.outcome.user_confidence}/5"
        )
    output_result(summary)

    if layers.is_locked:
        click.echo()
        rows = [
            [
                i,
                seg.type,
                f"{seg.start_time}-{seg.end_time}s",
                seg.target_asl,
                seg.pacing_curve,
                layers.execution.visual_density[i].intensity,
            ]
            for i, seg in enumerate(layers.execution.segments)
        ]
        output_table(["#", "TYPE", "RANGE", "ASL", "PACING", "INTENSITY"], rows)


@project.command("lock")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@timeline_options
@click.pass_context
def lock(
    ctx: click.Context,
    project_file: Path,
    duration: Optional[int],
    structure_id: Optional[str],
    platform: Optional[str],
    dialogue: Optional[bool],
) -> None:
    """Lock a timeline into the project.

    Refused when the configuration has a blocking conflict.

    \b
    Examples:
        resonance project lock plan.json -d 60 -s surge -p TikTok
    """
    from core.planner import build_phase1_data, build_platform_context, plan_timeline
    from core.project_state import LockBlueprint

    params, warnings = resolve_parameters(ctx, duration, structure_id, platform, dialogue)
    result = plan_timeline(params, warnings)

    if result.is_blocked:
        blocking = [c for c in result.conflicts if c.is_blocking]
        exit_with(
            ExitCode.BLOCKED,
            "; ".join(f"{c.code}: {c.message} {c.fix}" for c in blocking),
        )
    for conflict in result.conflicts:
        output_warning(f"{conflict.code}: {conflict.message}")

    _apply(
        ctx,
        project_file,
        LockBlueprint(
            phase1_data=build_phase1_data(result),
            platform_context=build_platform_context(params),
        ),
        f"Locked {result.structure.name} ({params.duration}s, {params.platform})",
    )


@project.command("set-bpm")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("bpm", type=float)
@click.pass_context
def set_bpm(ctx: click.Context, project_file: Path, bpm: float) -> None:
    """Set the audio plan tempo."""
    from core.project_state import SetBpm, UpdateExecution

    _apply(ctx, project_file, UpdateExecution(SetBpm(bpm)), f"BPM set to {bpm:g}")


@project.command("set-ducking")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("state", type=click.Choice(["on", "off"]))
@click.pass_context
def set_ducking(ctx: click.Context, project_file: Path, state: str) -> None:
    """Turn music ducking on or off."""
    from core.project_state import SetDuckingEnabled, UpdateExecution

    _apply(
        ctx,
        project_file,
        UpdateExecution(SetDuckingEnabled(state == "on")),
        f"Ducking {state}",
    )


@project.command("set-pacing")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("index", type=int)
@click.argument("curve", type=click.Choice(["STATIC", "LINEAR_ACCEL", "EXP_DECEL"], case_sensitive=False))
@click.pass_context
def set_pacing(ctx: click.Context, project_file: Path, index: int, curve: str) -> None:
    """Set the pacing curve of segment INDEX."""
    from core.project_state import SetSegmentPacing, UpdateExecution

    _apply(
        ctx,
        project_file,
        UpdateExecution(SetSegmentPacing(index, curve.upper())),
        f"Segment {index} pacing set to {curve.upper()}",
    )


@project.command("set-intensity")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("index", type=int)
@click.argument("level", type=click.Choice(["LOW", "MED", "HIGH"], case_sensitive=False))
@click.pass_context
def set_intensity(ctx: click.Context, project_file: Path, index: int, level: str) -> None:
    """Set the visual intensity of segment INDEX."""
    from core.project_state import SetSegmentIntensity, UpdateExecution

    _apply(
        ctx,
        project_file,
        UpdateExecution(SetSegmentIntensity(index, level.upper())),
        f"Segment {index} intensity set to {level.upper()}",
    )


@project.command("set-asl")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("index", type=int)
@click.argument("seconds", type=float)
@click.pass_context
def set_asl(ctx: click.Context, project_file: Path, index: int, seconds: float) -> None:
    """Set the target average shot length of segment INDEX."""
    from core.project_state import SetSegmentTargetASL, UpdateExecution

    _apply(
        ctx,
        project_file,
        UpdateExecution(SetSegmentTargetASL(index, seconds)),
        f"Segment {index} target ASL set to {seconds:g}s",
    )


@project.command("add-silence")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("start", type=float)
@click.argument("end", type=float)
@click.pass_context
def add_silence(ctx: click.Context, project_file: Path, start: float, end: float) -> None:
    """Add a silence marker from START to END seconds."""
    from core.project_state import AddSilenceMarker, UpdateExecution

    _apply(
        ctx,
        project_file,
        UpdateExecution(AddSilenceMarker(start, end)),
        f"Silence marker added at {start:g}-{end:g}s",
    )


@project.command("validate")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Exit with an error when validation fails")
@click.pass_context
def validate(ctx: click.Context, project_file: Path, strict: bool) -> None:
    """Re-run the readiness checks and show every signal.

    \b
    Examples:
        resonance project validate plan.json
        resonance project validate plan.json --strict
    """
    from core.project_state import ProjectStateMachine, RunValidation

    machine = ProjectStateMachine(_load(project_file))
    result = machine.dispatch(RunValidation())
    if not result["success"]:
        exit_with(ExitCode.BLOCKED, result["error"])

    _save(project_file, machine.project)
    report = machine.project.layers.validation

    if ctx.obj.get("json", False):
        output_result(report, as_json=True)
    else:
        color = {"PASS": "green", "WARNING": "yellow", "FAIL": "red"}[report.global_status]
        click.echo(click.style(f"Status: {report.global_status}", fg=color))
        for signal in report.signals:
            where = f" (segment {signal.segment_index})" if signal.segment_index is not None else ""
            click.echo(f"  [{signal.result}] {signal.check_name}{where}: {signal.message}")

    if strict and report.global_status == "FAIL":
        exit_with(ExitCode.VALIDATION_ERROR)


@project.command("log-outcome")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--posted/--not-posted", default=True, help="Whether the video was published")
@click.option("--retention", type=float, required=True, help="Percent of viewers past 3 seconds (0-100)")
@click.option("--confidence", type=int, required=True, help="Your confidence in the edit (1-5)")
@click.option("--platform", "-p", default=None, help="Platform posted to (defaults to the locked platform)")
@click.option("--drop-off", "drop_off", default=None, help="Timestamp where viewers dropped off")
@click.pass_context
def log_outcome(
    ctx: click.Context,
    project_file: Path,
    posted: bool,
    retention: float,
    confidence: int,
    platform: Optional[str],
    drop_off: Optional[str],
) -> None:
    """Record how the published video performed.

    \b
    Examples:
        resonance project log-outcome plan.json --retention 62 --confidence 4
    """
    from core.parameters import canonical_platform
    from core.project_state import LogOutcome
    from models.production import OutcomeLog

    if platform is None:
        blueprint = _load(project_file).layers.blueprint
        platform = (
            blueprint.platform_context.platform_id if blueprint
            else ctx.obj["settings"].default_platform
        )
    try:
        platform = canonical_platform(platform)
    except ValueError as e:
        handle_error(e)

    outcome = OutcomeLog(
        posted=posted,
        platform=platform,
        retention_3s=retention,
        user_confidence=confidence,
        logged_at=datetime.now().isoformat(),
        drop_off_timestamp=drop_off,
    )
    _apply(ctx, project_file, LogOutcome(outcome), f"Outcome logged for {platform}")


@project.command("unlock")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--clear-outcome/--keep-outcome",
    default=None,
    help="Also drop the outcome log (default from settings: keep)",
)
@click.pass_context
def unlock(ctx: click.Context, project_file: Path, clear_outcome: Optional[bool]) -> None:
    """Discard the blueprint, execution plan, and validation report."""
    from core.project_state import UnlockBlueprint

    _apply(
        ctx,
        project_file,
        UnlockBlueprint(),
        "Unlocked",
        clear_outcome_on_unlock=clear_outcome,
    )
