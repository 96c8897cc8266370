# hbsbuild/cli/interface.py
import sys
from pathlib import Path
from typing import Any, Dict

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
import structlog

from hbsbuild import __version__ as app_version
from hbsbuild.config.loader import load_config_file
from hbsbuild.config.settings import BuildSettings, PluginConfig
from hbsbuild.core.host import BuildResult, StandaloneBuild
from hbsbuild.core.pipeline import HandlebarsPipeline
from hbsbuild.exceptions import HbsBuildError
from hbsbuild.logging_setup import configure_logging

log = structlog.get_logger(__name__)

DEFAULT_OUTPUT_PATH = "dist"


def _merge_cli_options(file_options: Dict[str, Any], cli_params: Dict[str, Any]) -> BuildSettings:
    # cli values win over file values; empty multi-options leave file values alone.
    options = dict(file_options)
    output_path = options.pop("output_path", DEFAULT_OUTPUT_PATH)

    if cli_params.get("entry"):
        entries = list(cli_params["entry"])
        options["entry"] = entries[0] if len(entries) == 1 else entries
    if cli_params.get("partials"):
        options["partials"] = list(cli_params["partials"])
    for key in ("output", "data"):
        if cli_params.get(key) is not None:
            options[key] = cli_params[key]
    if cli_params.get("verbosity_level", 0) > 0:
        options["log"] = True
    if cli_params.get("output_path") is not None:
        output_path = cli_params["output_path"]

    return BuildSettings(plugin=PluginConfig.from_mapping(options), output_path=Path(output_path))


def _run_build(settings: BuildSettings) -> BuildResult:
    pipeline = HandlebarsPipeline(settings.plugin)
    build = StandaloneBuild(settings.output_path, plugins=[pipeline])
    stderr_console = RichConsole(file=sys.stderr)
    with stderr_console.status("rendering templates...", spinner="dots"):
        return build.run()


def _print_build_summary(result: BuildResult, settings: BuildSettings):
    click.secho("--- build summary ---", fg="cyan", err=True)
    click.echo(f"Output directory: {settings.output_path}", err=True)
    for written in result.written_files:
        click.echo(f"  {written.relative_to(settings.output_path).as_posix()}", err=True)
    click.echo(
        f"Files emitted: {len(result.written_files)} (tracking {len(result.file_dependencies)} dependencies)",
        err=True,
    )


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(version=app_version, package_name="hbsbuild", prog_name="hbsbuild", help="Show version and exit.")
def main_cli_group():
    """hbsbuild: render Handlebars templates with data, partials and helpers."""


@main_cli_group.command("build")
@optgroup.group("Configuration", help="Where build settings come from.")
@optgroup.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="TOML config file. Default: .hbsbuild.toml, hbsbuild.toml or [tool.hbsbuild] in pyproject.toml.")
@optgroup.group("Templates", help="Entry templates and their inputs.")
@optgroup.option("-e", "--entry", "entry", multiple=True, help="Glob pattern of entry templates. Repeatable.")
@optgroup.option("-p", "--partials", "partials", multiple=True, help="Glob pattern of partial templates. Repeatable.")
@optgroup.option("-d", "--data", "data", default=None, help="Glob pattern of JSON data files.")
@optgroup.group("Output", help="Where rendered files go.")
@optgroup.option("-o", "--output", "output", default=None, help="Output path template; '[name]' is replaced with the template name.")
@optgroup.option("--output-path", "output_path", type=click.Path(file_okay=False, path_type=Path), default=None, help=f"Build output directory. Default: {DEFAULT_OUTPUT_PATH}.")
@optgroup.group("Application Behavior", help="Logging.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
def build_command(config_path: Path, **cli_params: Any):
    """Render all entry templates once."""
    log_level = "warning"
    if cli_params.get("verbosity_level", 0) == 1: log_level = "info"
    elif cli_params.get("verbosity_level", 0) >= 2: log_level = "debug"
    configure_logging(log_level_str=log_level)

    try:
        settings = _merge_cli_options(load_config_file(config_path), cli_params)
        result = _run_build(settings)
    except HbsBuildError as e:
        log.error("handled_application_error_in_cli", error_type=type(e).__name__, message=str(e))
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    except Exception as e:
        log.critical("unexpected_critical_error_in_cli", message=str(e), exc_info=True)
        click.secho(f"Build failed: {e}", fg="red", err=True)
        sys.exit(1)

    _print_build_summary(result, settings)
