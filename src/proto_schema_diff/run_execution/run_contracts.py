"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from proto_schema_diff.comparison.comparator import COMPARE_ALL
from proto_schema_diff.comparison.comparison_models import Section
from proto_schema_diff.configuration.runtime_settings import SchemaSource
from proto_schema_diff.results_writing.report_models import ReportFormat


@dataclass(frozen=True)
class ComparisonRequest:
    """Input contract for executing one comparison run."""

    before: SchemaSource
    after: SchemaSource
    entity_name: str = COMPARE_ALL
    formats: tuple[ReportFormat, ...] = ()
    output_dir: Path | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed comparison run."""

    report: Section
    rendered: str
    output_paths: tuple[Path, ...]
    item_count: int

    @property
    def has_changes(self) -> bool:
        return self.item_count > 0
