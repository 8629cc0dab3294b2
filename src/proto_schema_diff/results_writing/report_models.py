"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ReportFormat(str, Enum):
    """Supported report file formats."""

    TEXT = "text"
    JSON = "json"
    XLSX = "xlsx"

    @property
    def extension(self) -> str:
        return "txt" if self is ReportFormat.TEXT else self.value


@dataclass(frozen=True)
class ComparisonMetadata:
    """Metadata rendered alongside the comparison report."""

    run_start: datetime
    before_source: str
    after_source: str
    entity_name: str
    item_count: int
