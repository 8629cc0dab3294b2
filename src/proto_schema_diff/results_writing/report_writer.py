"""Comparison report writer service."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from proto_schema_diff.comparison.comparison_models import Section, count_items_by_type

from .report_models import ComparisonMetadata, ReportFormat

CHANGES_SHEET_NAME = "Changes"
RUN_INFO_SHEET_NAME = "RunInfo"
CHANGE_COLUMNS = ("Path", "Section", "Change", "Before", "After", "Message")


def render_text_report(section: Section) -> str:
    """Render the pre-order, depth-indented text dump of a report tree."""
    return section.render()


def write_text_report(section: Section, output_path: Path | str) -> Path:
    output = _prepare_output(output_path)
    output.write_text(render_text_report(section) + "\n", encoding="utf-8")
    return output


def write_json_report(
    section: Section, output_path: Path | str, metadata: ComparisonMetadata
) -> Path:
    """Write the report tree, run metadata and per-kind counts as JSON."""
    document = {
        "metadata": _metadata_entries(metadata),
        "counts": {kind.value: count for kind, count in count_items_by_type(section).items()},
        "report": _section_to_mapping(section),
    }
    output = _prepare_output(output_path)
    output.write_text(
        json.dumps(document, ensure_ascii=False, indent=2) + "\n", encoding="utf-8"
    )
    return output


def write_results_workbook(
    section: Section, output_path: Path | str, metadata: ComparisonMetadata
) -> Path:
    """Write one row per reported change plus a RunInfo sheet."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = CHANGES_SHEET_NAME
    _write_changes_sheet(sheet, section)
    _write_run_info_sheet(workbook, section, metadata)

    output = _prepare_output(output_path)
    workbook.save(output)
    return output


def write_report(
    report_format: ReportFormat,
    section: Section,
    output_path: Path | str,
    metadata: ComparisonMetadata,
) -> Path:
    """Write ``section`` in the requested format."""
    if report_format is ReportFormat.TEXT:
        return write_text_report(section, output_path)
    if report_format is ReportFormat.JSON:
        return write_json_report(section, output_path, metadata)
    return write_results_workbook(section, output_path, metadata)


def _prepare_output(output_path: Path | str) -> Path:
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    return output


def _section_to_mapping(section: Section) -> dict[str, Any]:
    return {
        "kind": section.kind.value,
        "name_a": section.name_a,
        "name_b": section.name_b,
        "message": section.message(),
        "items": [
            {
                "kind": item.kind.value,
                "label": item.kind.label,
                "before": item.before,
                "after": item.after,
            }
            for item in section.items
        ],
        "subsections": [_section_to_mapping(child) for child in section.subsections],
    }


def _metadata_entries(metadata: ComparisonMetadata) -> dict[str, Any]:
    return {
        "run_start": metadata.run_start.isoformat(),
        "before": metadata.before_source,
        "after": metadata.after_source,
        "entity": metadata.entity_name,
        "item_count": metadata.item_count,
    }


def _write_changes_sheet(sheet, section: Section) -> None:
    for column, header in enumerate(CHANGE_COLUMNS, start=1):
        sheet.cell(row=1, column=column, value=header)
        sheet.cell(row=1, column=column).style = "Headline 1"

    widths = [len(header) for header in CHANGE_COLUMNS]
    for row, (path, item) in enumerate(section.iter_items(), start=2):
        owner = path[-1]
        values = (
            _format_path(path),
            owner.kind.value,
            item.kind.value,
            item.before,
            item.after,
            item.message(),
        )
        for column, value in enumerate(values, start=1):
            sheet.cell(row=row, column=column, value=value or None)
            widths[column - 1] = max(widths[column - 1], len(value))

    for column, width in enumerate(widths, start=1):
        sheet.column_dimensions[get_column_letter(column)].width = max(12, min(width + 4, 60))
    sheet.freeze_panes = "A2"


def _format_path(path: tuple[Section, ...]) -> str:
    names = [section.name_b or section.name_a for section in path[1:]]
    return " / ".join(names) if names else "/"


def _write_run_info_sheet(workbook, section: Section, metadata: ComparisonMetadata) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    entries: list[tuple[str, Any]] = list(_metadata_entries(metadata).items())
    counts: Mapping = count_items_by_type(section)
    entries.extend((kind.value, count) for kind, count in counts.items())
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
