"""
Gradle wrapper step — CLI entrypoint.

Usage:
    python -m wrapper_step.main --help
    python -m wrapper_step.main run
    python -m wrapper_step.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from wrapper_step import __version__
from wrapper_step.core.errors import StepError
from wrapper_step.core.observability.logging_config import DEFAULT_LEVEL, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="gradlew-step")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only print errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="YAML file with default step inputs.",
)
@click.option("--project-root-dir", default=None, help="Overrides $project_root_dir.")
@click.option("--gradle-version", default=None, help="Overrides $gradle_version.")
@click.option("--android-home", default=None, help="Overrides $android_home.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    project_root_dir: str | None,
    gradle_version: str | None,
    android_home: str | None,
) -> None:
    """Gradle wrapper step — make sure an Android project has a gradlew."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["overrides"] = {
        "project_root_dir": project_root_dir,
        "gradle_version": gradle_version,
        "android_home": android_home,
    }

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("WRAPPER_STEP_LOG_LEVEL", DEFAULT_LEVEL)

    setup_logging(
        level=level,
        log_file=os.environ.get("WRAPPER_STEP_LOG_FILE"),
        log_file_level=os.environ.get("WRAPPER_STEP_LOG_FILE_LEVEL"),
    )


# ── Helpers ─────────────────────────────────────────────────────


def _fail(err: StepError, as_json: bool = False) -> NoReturn:
    """Report a fatal error and terminate with exit status 1."""
    if as_json:
        click.echo(json.dumps({"ok": False, "category": err.category, "error": str(err)}, indent=2))
    else:
        click.echo()
        click.secho(f"❌ {err}", fg="red", err=True)
    sys.exit(1)


def _load(ctx: click.Context, **extra: Any):
    """Build the StepConfig from env, --config file and CLI overrides."""
    from wrapper_step.core.config.loader import load_config

    overrides = dict(ctx.obj["overrides"])
    overrides.update(extra)
    return load_config(config_path=ctx.obj.get("config_path"), overrides=overrides)


def _print_configs(ctx: click.Context, config) -> None:
    if ctx.obj.get("quiet"):
        return
    click.echo()
    click.secho("Configs:", fg="cyan", bold=True)
    for line in config.summary_lines():
        click.echo(line)
    click.echo()


# ── Commands ────────────────────────────────────────────────────


@cli.command()
@click.option(
    "--mode",
    "generation_mode",
    type=click.Choice(["command", "template"]),
    default=None,
    help="Run 'gradle wrapper' (command) or copy the Android SDK template (template).",
)
@click.option("--no-export", is_flag=True, help="Don't export GRADLEW_PATH with envman.")
@click.option(
    "--download-distribution",
    is_flag=True,
    help="Fetch the requested Gradle distribution and use its gradle binary.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    generation_mode: str | None,
    no_export: bool,
    download_distribution: bool,
    as_json: bool,
) -> None:
    """Generate the Gradle wrapper if the project has none."""
    from wrapper_step.adapters.shell.command import ShellCommandRunner
    from wrapper_step.core.use_cases.generate import run_generate

    try:
        config = _load(
            ctx,
            generation_mode=generation_mode,
            export_outputs=False if no_export else None,
            download_distribution=True if download_distribution else None,
        )
        if not as_json:
            _print_configs(ctx, config)
        result = run_generate(config, ShellCommandRunner())
    except StepError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    for warning in result.warnings:
        click.secho(f"⚠️  {warning}", fg="yellow")

    if result.generated:
        click.secho(f"✅ Gradle Wrapper generated: {result.gradlew_path}", fg="green", bold=True)
        if result.exported:
            click.echo(f"   Exported GRADLEW_PATH={result.gradlew_path}")
    else:
        click.secho(f"✅ Gradle Wrapper exist at: {result.gradlew_path}", fg="green", bold=True)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def locate(ctx: click.Context, as_json: bool) -> None:
    """Show which build file anchors the project."""
    from wrapper_step.core.config.loader import validate_project_root
    from wrapper_step.core.services.build_files import locate_root_build_file

    try:
        config = _load(ctx)
        root = validate_project_root(config)
        located = locate_root_build_file(root.resolve())
    except StepError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(located.to_dict(), indent=2))
        return

    click.secho(f"📄 {located.path}", fg="cyan", bold=True)
    if located.ambiguous:
        click.secho("   ⚠️  Other candidates at the same depth:", fg="yellow")
        for pth in located.candidates[1:]:
            click.echo(f"     • {pth}")
    click.echo(f"   gradlew: {located.gradlew_path}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def licenses(ctx: click.Context, as_json: bool) -> None:
    """Write the Android SDK license acceptance files."""
    from wrapper_step.core.config.loader import validate_android_home
    from wrapper_step.core.services.licenses import ensure_licenses

    try:
        config = _load(ctx)
        report = ensure_licenses(validate_android_home(config))
    except StepError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.secho(f"🔑 {report.licenses_dir}", fg="cyan", bold=True)
    for name in report.created:
        click.secho(f"   ✓ {name} generated", fg="green")
    for name in report.existing:
        click.echo(f"   • {name} exist")


@cli.command()
@click.argument("version")
@click.option("--timeout", default=300, type=int, show_default=True, help="Download timeout (s).")
def download(version: str, timeout: int) -> None:
    """Download and unpack the Gradle VERSION distribution."""
    from wrapper_step.adapters.shell.command import ShellCommandRunner
    from wrapper_step.core.services.distribution import fetch_distribution

    try:
        dist_dir = fetch_distribution(version, ShellCommandRunner(), timeout=timeout)
    except StepError as e:
        _fail(e)

    click.secho(f"📦 {dist_dir}", fg="green", bold=True)


@cli.group()
def config() -> None:
    """Step input commands."""


@config.command("check")
@click.option(
    "--mode",
    "generation_mode",
    type=click.Choice(["command", "template"]),
    default=None,
    help="Validate for this generation mode.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, generation_mode: str | None, as_json: bool) -> None:
    """Validate the step inputs without touching the project."""
    from wrapper_step.core.config.loader import validate_config

    try:
        step_config = _load(ctx, generation_mode=generation_mode)
        validate_config(step_config)
    except StepError as e:
        _fail(e, as_json)

    if as_json:
        click.echo(json.dumps({"ok": True, "config": step_config.model_dump()}, indent=2))
        return

    _print_configs(ctx, step_config)
    click.secho("✅ Inputs are valid", fg="green", bold=True)


if __name__ == "__main__":
    cli()
