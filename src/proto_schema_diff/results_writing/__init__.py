"""Results writing domain exports."""

from .report_models import ComparisonMetadata, ReportFormat
from .report_writer import (
    render_text_report,
    write_json_report,
    write_report,
    write_results_workbook,
    write_text_report,
)

__all__ = [
    "ComparisonMetadata",
    "ReportFormat",
    "render_text_report",
    "write_json_report",
    "write_report",
    "write_results_workbook",
    "write_text_report",
]
