"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from proto_schema_diff.comparison import COMPARE_ALL
from proto_schema_diff.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    SchemaSource,
    load_configuration,
    write_placeholder_configuration,
)
from proto_schema_diff.results_writing import ReportFormat
from proto_schema_diff.run_execution import (
    ComparisonRequest,
    RunExecutionError,
    RunOutcome,
    execute_schema_comparison_run,
    request_from_configuration,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="proto-schema-diff")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Verbosity of diagnostic logging written to stderr.",
)
def cli(log_level: str) -> None:
    """Report structural differences between two protobuf schema versions."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command(name="compare")
@click.argument("root_dir_a", type=click.Path(file_okay=False, path_type=Path))
@click.argument("file_a", type=str)
@click.argument("root_dir_b", type=click.Path(file_okay=False, path_type=Path))
@click.argument("file_b", type=str)
@click.argument("name", type=str, required=False, default=COMPARE_ALL)
@click.option(
    "--format",
    "formats",
    multiple=True,
    type=click.Choice([member.value for member in ReportFormat], case_sensitive=False),
    help="Report file format to write; repeat for several formats.",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for report files (defaults to the current directory).",
)
# pylint: disable=too-many-arguments
def compare(
    root_dir_a: Path,
    file_a: str,
    root_dir_b: Path,
    file_b: str,
    name: str,
    formats: tuple[str, ...],
    output_dir: Path | None,
) -> None:
    """Compare FILE_A under ROOT_DIR_A with FILE_B under ROOT_DIR_B.

    NAME is a fully qualified message or enum name; "." (the default) compares
    every top-level message and enum of both files.
    """
    report_formats = tuple(dict.fromkeys(ReportFormat(value.lower()) for value in formats))
    request = ComparisonRequest(
        before=SchemaSource(root_dir=root_dir_a, file_path=file_a),
        after=SchemaSource(root_dir=root_dir_b, file_path=file_b),
        entity_name=name,
        formats=report_formats,
        output_dir=(output_dir or Path.cwd()) if report_formats else None,
    )
    _echo_outcome(_execute(request))


# pylint: enable=too-many-arguments


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML/JSON comparison configuration file",
)
def run_comparison(config_path: str) -> None:
    """Execute the comparison described by a configuration file."""
    try:
        configuration = load_configuration(config_path)
    except ConfigurationError as exc:
        raise CliError(str(exc)) from exc
    _echo_outcome(_execute(request_from_configuration(configuration)))


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML comparison configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML comparison configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def _execute(request: ComparisonRequest) -> RunOutcome:
    try:
        return execute_schema_comparison_run(request)
    except RunExecutionError as exc:
        lines = [f"Error: {diagnostic}" for diagnostic in exc.diagnostics]
        lines.append(str(exc))
        raise CliError("\n".join(lines)) from exc


def _echo_outcome(outcome: RunOutcome) -> None:
    click.echo(outcome.rendered)
    for output_path in outcome.output_paths:
        click.echo(f"wrote {output_path}", err=True)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
