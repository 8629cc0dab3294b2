"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from proto_schema_diff.results_writing.report_models import ReportFormat


@dataclass(frozen=True)
class SchemaSource:
    """Location of one schema version."""

    root_dir: Path
    file_path: str

    def describe(self) -> str:
        return f"{self.root_dir}:{self.file_path}"


@dataclass(frozen=True)
class ReportSettings:
    """Report files written after a comparison."""

    formats: tuple[ReportFormat, ...]
    output_dir: Path | None


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    before: SchemaSource
    after: SchemaSource
    entity_name: str
    report: ReportSettings
