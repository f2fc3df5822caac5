"""Structure catalog and timeline preview commands."""

from typing import Optional

import click

from cli.utils.errors import handle_error
from cli.utils.output import output_result, output_table, output_warning


def resolve_parameters(
    ctx: click.Context,
    duration: Optional[int],
    structure_id: Optional[str],
    platform: Optional[str],
    dialogue: Optional[bool],
):
    """Fill unset options from settings and normalize them.

    Exits with a validation error if the platform is unknown.
    """
    from core.parameters import normalize_parameters

    settings = ctx.obj["settings"]
    try:
        params, warnings = normalize_parameters(
            duration=duration if duration is not None else settings.default_duration,
            structure_id=structure_id or settings.default_structure_id,
            platform=platform or settings.default_platform,
            has_dialogue=dialogue if dialogue is not None else settings.default_has_dialogue,
            fallback_structure_id=settings.default_structure_id,
        )
    except ValueError as e:
        handle_error(e)

    for warning in warnings:
        output_warning(warning)
    return params, warnings


def timeline_options(func):
    """Shared -d/-s/-p/--dialogue options."""
    func = click.option(
        "--dialogue/--no-dialogue",
        default=None,
        help="Content has speech (softens sound density and cut speed)",
    )(func)
    func = click.option(
        "--platform", "-p",
        default=None,
        help="Target platform (TikTok, Instagram, YouTube, YouTube Shorts, LinkedIn)",
    )(func)
    func = click.option(
        "--structure", "-s", "structure_id",
        default=None,
        help="Structure id (see 'resonance structures')",
    )(func)
    func = click.option(
        "--duration", "-d",
        type=int,
        default=None,
        help="Duration in seconds (5-180)",
    )(func)
    return func


@click.command("structures")
@click.pass_context
def structures(ctx: click.Context) -> None:
    """List the emotional structure templates.

    \b
    Examples:
        resonance structures
        resonance --json structures
    """
    from core.structures import get_all_structures

    as_json = ctx.obj.get("json", False)
    templates = get_all_structures()

    if as_json:
        output_result([t.to_dict() for t in templates], as_json=True)
        return

    rows = [
        [
            t.id,
            t.name,
            " > ".join(f"{seg.type} {seg.base_percentage}%" for seg in t.segments),
            t.pacing.start,
        ]
        for t in templates
    ]
    output_table(["ID", "NAME", "SEGMENTS", "START"], rows)


@click.command("timeline")
@timeline_options
@click.pass_context
def timeline(
    ctx: click.Context,
    duration: Optional[int],
    structure_id: Optional[str],
    platform: Optional[str],
    dialogue: Optional[bool],
) -> None:
    """Preview a timeline with its conflicts and quality score.

    \b
    Examples:
        resonance timeline -d 60 -s surge -p TikTok
        resonance timeline -d 90 -s wave -p YouTube --dialogue
        resonance --json timeline -d 30
    """
    from core.partition import format_timeline
    from core.planner import plan_timeline

    as_json = ctx.obj.get("json", False)
    params, warnings = resolve_parameters(ctx, duration, structure_id, platform, dialogue)
    result = plan_timeline(params, warnings)

    if as_json:
        output_result(result, as_json=True)
        return

    click.echo(
        f"{result.structure.name} | {params.duration}s | {params.platform}"
        + (" | dialogue" if params.has_dialogue else "")
    )
    click.echo(format_timeline(list(result.timeline)))

    click.echo(f"\nQuality: {result.quality.total_score}/100")
    for line in result.quality.feedback:
        click.echo(f"  - {line}")

    for conflict in result.conflicts:
        color = "red" if conflict.is_blocking else "yellow"
        click.echo(click.style(f"\n[{conflict.severity}] {conflict.code}: {conflict.message}", fg=color))
        click.echo(f"  Fix: {conflict.fix}")
