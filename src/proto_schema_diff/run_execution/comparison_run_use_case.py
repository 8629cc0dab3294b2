"""Comparison run use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from proto_schema_diff.comparison import compare_schemas, count_items_by_type
from proto_schema_diff.configuration.runtime_settings import Configuration, SchemaSource
from proto_schema_diff.results_writing import ComparisonMetadata, render_text_report, write_report
from proto_schema_diff.schema_management import SchemaError, SchemaFile, load_schema_file

from .run_contracts import ComparisonRequest, RunOutcome

_LOGGER = logging.getLogger(__name__)

SchemaLoader = Callable[[str, Path], SchemaFile]


class RunExecutionError(Exception):
    """Raised when a comparison run cannot be completed."""

    def __init__(self, message: str, diagnostics=()) -> None:
        super().__init__(message)
        self.diagnostics = tuple(diagnostics)


def execute_schema_comparison_run(
    request: ComparisonRequest,
    *,
    schema_loader: SchemaLoader | None = None,
) -> RunOutcome:
    """Load both schema versions, compare, trim and write the requested reports."""
    loader = schema_loader or load_schema_file
    run_start = datetime.now(UTC)

    file_a = _load_schema(loader, request.before)
    file_b = _load_schema(loader, request.after)

    _LOGGER.info(
        "Comparing %s -> %s (entity: %s)", file_a.name, file_b.name, request.entity_name
    )
    report = compare_schemas(file_a, file_b, request.entity_name)
    report.trim()
    item_count = sum(count_items_by_type(report).values())
    _LOGGER.info("Comparison finished with %d reported changes", item_count)

    metadata = ComparisonMetadata(
        run_start=run_start,
        before_source=request.before.describe(),
        after_source=request.after.describe(),
        entity_name=request.entity_name,
        item_count=item_count,
    )
    output_paths = _write_reports(request, report, metadata)
    return RunOutcome(
        report=report,
        rendered=render_text_report(report),
        output_paths=output_paths,
        item_count=item_count,
    )


def request_from_configuration(configuration: Configuration) -> ComparisonRequest:
    """Build a run request from a loaded configuration file."""
    return ComparisonRequest(
        before=configuration.before,
        after=configuration.after,
        entity_name=configuration.entity_name,
        formats=configuration.report.formats,
        output_dir=configuration.report.output_dir,
    )


def _load_schema(loader: SchemaLoader, source: SchemaSource) -> SchemaFile:
    try:
        return loader(source.file_path, source.root_dir)
    except SchemaError as exc:
        raise RunExecutionError(str(exc), diagnostics=exc.diagnostics) from exc
    except OSError as exc:
        raise RunExecutionError(f"Failed to load schema {source.describe()}: {exc}") from exc


def _write_reports(
    request: ComparisonRequest, report, metadata: ComparisonMetadata
) -> tuple[Path, ...]:
    if not request.formats:
        return ()
    if request.output_dir is None:
        raise RunExecutionError("An output directory is required to write report files.")

    timestamp = metadata.run_start.strftime("%Y%m%d-%H%M%S")
    written: list[Path] = []
    for report_format in request.formats:
        destination = request.output_dir / f"schema-diff-{timestamp}.{report_format.extension}"
        try:
            written.append(write_report(report_format, report, destination, metadata).resolve())
        except OSError as exc:
            raise RunExecutionError(f"Failed to write {destination}: {exc}") from exc
        _LOGGER.info("Wrote %s report to %s", report_format.value, destination)
    return tuple(written)
