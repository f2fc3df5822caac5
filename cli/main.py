"""Resonance Engine CLI entry point."""

import logging

import click

from cli import __version__


@click.group()
@click.version_option(version=__version__, prog_name="resonance")
@click.option("--json", "output_json", is_flag=True, help="Output in JSON format")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, output_json: bool, verbose: bool) -> None:
    """Resonance Engine - Emotional structure timelines for short video.

    Pick a structure, preview its timeline for a duration and platform,
    then lock it into a project and plan the edit.

    \b
    Examples:
        resonance structures
        resonance timeline -d 60 -s surge -p TikTok
        resonance project lock plan.json -d 45 -s wave -p Instagram

    \b
    Shell Completion:
        # Bash (~/.bashrc)
        eval "$(_RESONANCE_COMPLETE=bash_source resonance)"

        # Zsh (~/.zshrc)
        eval "$(_RESONANCE_COMPLETE=zsh_source resonance)"

        # Fish (~/.config/fish/completions/resonance.fish)
        _RESONANCE_COMPLETE=fish_source resonance > ~/.config/fish/completions/resonance.fish
    """
    from core.settings import load_settings

    settings = load_settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    ctx.ensure_object(dict)
    ctx.obj["json"] = output_json
    ctx.obj["settings"] = settings


@cli.command("completion")
@click.argument("shell", type=click.Choice(["bash", "zsh", "fish"]))
def completion(shell: str) -> None:
    """Generate shell completion script.

    \b
    Examples:
        # Bash - add to ~/.bashrc
        resonance completion bash >> ~/.bashrc

        # Fish - save to completions directory
        resonance completion fish > ~/.config/fish/completions/resonance.fish
    """
    import os
    import subprocess

    env_var = "_RESONANCE_COMPLETE"
    fallback = {
        "bash": 'eval "$(_RESONANCE_COMPLETE=bash_source resonance)"',
        "zsh": 'eval "$(_RESONANCE_COMPLETE=zsh_source resonance)"',
        "fish": "_RESONANCE_COMPLETE=fish_source resonance | source",
    }

    env = os.environ.copy()
    env[env_var] = f"{shell}_source"

    try:
        result = subprocess.run(
            ["resonance"],
            env=env,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        # resonance not installed, provide manual instructions
        click.echo(fallback[shell])
        return

    click.echo(result.stdout if result.stdout else fallback[shell])


def register_commands() -> None:
    """Register all command modules."""
    from cli.commands import project, timeline

    cli.add_command(timeline.structures)
    cli.add_command(timeline.timeline)
    cli.add_command(project.project)


def main() -> None:
    """Main entry point for the CLI."""
    register_commands()
    cli()


if __name__ == "__main__":
    main()
