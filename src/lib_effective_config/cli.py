"""CLI adapter for ``lib_effective_config`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators inspect the effective configuration of a service from a shell:
which value wins for each key, from which source, with secrets masked.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_env_prefix` – exposes :func:`lib_effective_config.core.default_env_prefix`.
* :func:`cli_props` – full report as JSON.
* :func:`cli_prop` – single key as JSON (exit code ``1`` when no source defines it).
* :func:`cli_sources` – every source with all of its values.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer. It assembles sources through
:func:`lib_effective_config.core.collect_sources` and renders the domain value
objects; ``lib_cli_exit_tools`` owns the exit code strategy.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import PropertiesView, collect_sources
from .core import default_env_prefix as _default_env_prefix
from .domain.report import sources_to_json

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when metadata is unavailable."""

    try:
        return metadata.version("lib_effective_config")
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Read-only view of the effective configuration",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_effective_config",
    message="lib_effective_config version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_effective_config")
    except metadata.PackageNotFoundError:
        click.echo("lib_effective_config (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_effective_config')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.11')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("env-prefix", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("slug")
def cli_env_prefix(slug: str) -> None:
    """Compute the canonical environment prefix for *slug*.

    Examples
    --------
    >>> from click.testing import CliRunner
    >>> result = CliRunner().invoke(cli, ["env-prefix", "config-kit"])
    >>> result.output.strip()
    'CONFIG_KIT'
    """

    click.echo(_default_env_prefix(slug))


def _source_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the options shared by every reporting command."""

    options = [
        click.option(
            "--file",
            "files",
            multiple=True,
            type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
            help="Structured configuration file (TOML/JSON/YAML); later files win (repeatable)",
        ),
        click.option(
            "--dotenv",
            type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
            default=None,
            help="Explicit .env file to include",
        ),
        click.option(
            "--start-dir",
            type=click.Path(path_type=Path, exists=True, file_okay=False, dir_okay=True, readable=True),
            default=None,
            help="Search for .env upwards from this directory",
        ),
        click.option("--env/--no-env", "include_env", default=True, help="Include process environment variables"),
        click.option("--env-prefix", default=None, help="Only expose environment variables with this prefix"),
        click.option("--set", "assignments", multiple=True, help="Highest-precedence KEY=VALUE override (repeatable)"),
        click.option(
            "--sanitize",
            "sanitize_keys",
            multiple=True,
            help="Key pattern to mask; replaces the default set (repeatable)",
        ),
        click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _build_view(
    files: Sequence[Path],
    dotenv: Optional[Path],
    start_dir: Optional[Path],
    include_env: bool,
    env_prefix: Optional[str],
    assignments: Sequence[str],
    sanitize_keys: Sequence[str],
) -> PropertiesView:
    """Assemble the default sources and wrap them in a :class:`PropertiesView`."""

    overrides = _parse_assignments(assignments)
    sources = collect_sources(
        overrides=overrides,
        include_env=include_env,
        env_prefix=env_prefix,
        dotenv=str(dotenv) if dotenv is not None else None,
        start_dir=str(start_dir) if start_dir is not None else None,
        files=[str(path) for path in files],
    )
    return PropertiesView(sources, keys_to_sanitize=sanitize_keys or None)


@cli.command("props", context_settings=CLICK_CONTEXT_SETTINGS)
@_source_options
@click.option("--pattern", default=None, help="Only report keys matching this regular expression")
def cli_props(pattern: Optional[str], indent: Optional[int], **options: Any) -> None:
    """Print every key with its effective value and source as JSON."""

    report = _build_view(**options).get_report(pattern)
    click.echo(report.to_json(indent=indent))


@cli.command("prop", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("key")
@_source_options
def cli_prop(key: str, indent: Optional[int], **options: Any) -> None:
    """Print the effective value of KEY as JSON; exit with code 1 when no source defines it."""

    entry = _build_view(**options).get_entry(key)
    if entry is None:
        click.echo(f"No source defines {key}", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(entry.to_dict(), indent=indent, separators=(",", ":"), ensure_ascii=False, default=str))


@cli.command("sources", context_settings=CLICK_CONTEXT_SETTINGS)
@_source_options
@click.option("--pattern", default=None, help="Only list keys matching this regular expression")
def cli_sources(pattern: Optional[str], indent: Optional[int], **options: Any) -> None:
    """Print every source in precedence order with all of its values, shadowed ones included."""

    descriptors = _build_view(**options).get_sources(pattern)
    click.echo(sources_to_json(descriptors, indent=indent))


def _parse_assignments(values: Sequence[str]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` arguments into a mapping, preserving order."""

    overrides: dict[str, str] = {}
    for value in values:
        key, separator, raw = value.partition("=")
        if not separator or not key.strip():
            raise click.BadParameter(f"Expected KEY=VALUE, got {value!r}", param_hint="--set")
        overrides[key.strip()] = raw
    return overrides


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_effective_config",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
