"""
mdfix — CLI entrypoint.

Usage:
    mdfix                      # fix the configured roots in place
    mdfix fix docs/ README.md  # fix explicit roots
    mdfix fix --dry-run        # report, write nothing
    mdfix rules
    mdfix config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from mdfix import __version__
from mdfix.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mdfix")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to mdfix.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """mdfix — auto-fix common markdownlint issues in place.

    Without a command, fixes every Markdown file under the configured roots.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )

    if ctx.invoked_subcommand is None:
        ctx.invoke(fix)


@cli.command()
@click.argument("roots", nargs=-1, type=click.Path(path_type=Path))
@click.option("--dry-run", is_flag=True, help="Report files that would change, write nothing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def fix(
    ctx: click.Context,
    roots: tuple[Path, ...] = (),
    dry_run: bool = False,
    as_json: bool = False,
) -> None:
    """Fix Markdown files under ROOTS (directories or single files;
    default: the configured roots).

    Examples:

        mdfix fix

        mdfix fix docs project_rules

        mdfix fix --dry-run
    """
    from mdfix.core.services.md_walker import FileOutcome
    from mdfix.core.use_cases.fix import run_fix

    quiet = ctx.obj.get("quiet", False)

    def _echo_outcome(outcome: FileOutcome) -> None:
        if quiet:
            return
        if not dry_run:
            click.echo(f"Fixed: {outcome.path}")
        elif outcome.changed:
            click.secho(f"Would fix: {outcome.path}", fg="yellow")

    result = run_fix(
        config_path=ctx.obj.get("config_path"),
        roots=list(roots) or None,
        dry_run=dry_run,
        on_file=None if as_json else _echo_outcome,
    )
    report = result.report

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok or (dry_run and report.changed):
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if ctx.obj.get("verbose"):
        click.echo()
        click.secho(
            f"   {len(report.files)} file(s), {len(report.changed)} changed, "
            f"{len(report.root_errors)} root error(s)",
            bold=True,
        )

    if dry_run and report.changed:
        sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def rules(ctx: click.Context, as_json: bool) -> None:
    """List the rewrite rules in the order they run."""
    from mdfix.core.config.loader import ConfigError, load_config
    from mdfix.core.services.md_transforms import RULES

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    disabled = set(config.disable)

    if as_json:
        click.echo(json.dumps(
            [{**rule.to_dict(), "enabled": rule.name not in disabled} for rule in RULES],
            indent=2,
        ))
        return

    click.secho("\n📝 Rewrite pipeline:", fg="cyan", bold=True)
    for i, rule in enumerate(RULES, 1):
        line = f"   {i:>2}. {rule.code}  {rule.name:<26} {rule.description}"
        if rule.name in disabled:
            click.secho(f"{line}  (disabled)", dim=True)
        else:
            click.echo(line)
    click.echo()


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate mdfix.yml."""
    from mdfix.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Roots: {len(result.config.roots)}")
        click.echo(f"   Extensions: {', '.join(result.config.extensions)}")
        if result.config.disable:
            click.echo(f"   Disabled rules: {', '.join(result.config.disable)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


if __name__ == "__main__":
    cli()
