"""
buildprops — CLI entrypoint.

Usage:
    python -m buildprops.main --help
    python -m buildprops.main generate --from git.json --stamp-build-time
    python -m buildprops.main read target/classes/git.properties
    python -m buildprops.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from buildprops import __version__
from buildprops.core.observability.logging_config import setup_logging

_FORMAT_CHOICE = click.Choice(["properties", "json"], case_sensitive=False)


@click.group()
@click.version_option(version=__version__, prog_name="buildprops")
@click.option("--verbose", "-v", is_flag=True, help="Show generator status lines.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to buildprops.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """buildprops — write build metadata files only when they change."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("BUILDPROPS_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("BUILDPROPS_LOG_FILE"),
        log_file_level=os.environ.get("BUILDPROPS_LOG_FILE_LEVEL"),
    )


@cli.command()
@click.option(
    "--from",
    "sources",
    multiple=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Property source file (.json, .yml, .properties). Repeatable.",
)
@click.option("--set", "assignments", multiple=True, help="KEY=VALUE property. Repeatable.")
@click.option("--format", "fmt", type=_FORMAT_CHOICE, default=None, help="Output format.")
@click.option("--prefix", default=None, help="Property prefix (default: git).")
@click.option("--base-dir", default=None, help="Directory relative output paths resolve against.")
@click.option("--output", "-o", "filename", default=None, help="Output filename or absolute path.")
@click.option("--encoding", default=None, help="Character encoding for text I/O.")
@click.option("--project-name", default=None, help="Module name shown in log lines.")
@click.option(
    "--stamp-build-time",
    is_flag=True,
    help="Set <prefix>.build.time to the current UTC time.",
)
@click.option(
    "--refresh-log",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Append changed output paths to this NDJSON file.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(
    ctx: click.Context,
    sources: tuple[Path, ...],
    assignments: tuple[str, ...],
    fmt: str | None,
    prefix: str | None,
    base_dir: str | None,
    filename: str | None,
    encoding: str | None,
    project_name: str | None,
    stamp_build_time: bool,
    refresh_log: Path | None,
    as_json: bool,
) -> None:
    """Write the properties file unless it is already up to date.

    Examples:

        buildprops generate --set git.commit.id=abc123 --stamp-build-time

        buildprops generate --from git.json --format json -o build/git.json
    """
    from buildprops.core.use_cases.generate import run_generate

    result = run_generate(
        config_path=ctx.obj.get("config_path"),
        sources=list(sources),
        assignments=list(assignments),
        overrides={
            "format": fmt.lower() if fmt else None,
            "prefix": prefix,
            "base_dir": base_dir,
            "filename": filename,
            "encoding": encoding,
            "project_name": project_name,
        },
        stamp_build_time=stamp_build_time,
        refresh_log=refresh_log,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    outcome = result.outcome
    assert outcome is not None  # guaranteed after error check above

    if ctx.obj.get("quiet"):
        return

    if outcome.written:
        click.secho(f"✅ Wrote {outcome.path}", fg="green")
        click.echo(f"   {result.property_count} properties ({outcome.format.value})")
    else:
        click.secho(f"✓ {outcome.path} is up to date", fg="cyan")


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--format", "fmt", type=_FORMAT_CHOICE, default=None, help="File format (default: from suffix).")
@click.option("--encoding", default="utf-8", show_default=True, help="Character encoding.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def read(path: Path, fmt: str | None, encoding: str, as_json: bool) -> None:
    """Show the properties stored in an existing generated file."""
    from buildprops.core.use_cases.generate import read_properties_file

    result = read_properties_file(path, fmt, encoding)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.properties:
        click.secho("No properties found.", fg="yellow")
        return

    width = max(len(k) for k in result.properties)
    for key in sorted(result.properties):
        click.secho(f"  {key:<{width}}", fg="yellow", nl=False)
        click.echo(f"  {result.properties[key]}")


@cli.group()
def config() -> None:
    """Generator configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate buildprops.yml and show the effective settings."""
    from buildprops.core.config.loader import ConfigError, load_settings

    try:
        settings = load_settings(ctx.obj.get("config_path"))
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho("❌ Configuration errors:", fg="red", bold=True)
            click.echo(f"   • {e}")
        sys.exit(1)

    if as_json:
        data = settings.model_dump(mode="json")
        click.echo(json.dumps({"valid": True, "settings": data}, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   Format:   {settings.format.value}")
    click.echo(f"   Prefix:   {settings.prefix}")
    click.echo(f"   Output:   {settings.filename}")
    click.echo(f"   Base dir: {settings.base_dir}")
    click.echo(f"   Encoding: {settings.encoding}")
    if settings.project_name:
        click.echo(f"   Module:   {settings.project_name}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
