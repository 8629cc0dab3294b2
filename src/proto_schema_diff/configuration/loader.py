"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from proto_schema_diff.comparison.comparator import COMPARE_ALL
from proto_schema_diff.results_writing.report_models import ReportFormat

from .runtime_settings import Configuration, ReportSettings, SchemaSource


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.resolve().parent
    before = _parse_schema_source(parsed.get("before"), "before", base_path)
    after = _parse_schema_source(parsed.get("after"), "after", base_path)
    entity_name = _parse_comparison_section(parsed.get("comparison"))
    report = _parse_report_section(parsed.get("report"), base_path)

    return Configuration(
        path=path,
        before=before,
        after=after,
        entity_name=entity_name,
        report=report,
    )


def _parse_schema_source(value: Any, section_name: str, base_path: Path) -> SchemaSource:
    section = _require_mapping(value, section_name)
    root_dir = _require_non_empty_string(section.get("root_dir"), f"{section_name}.root_dir")
    file_path = _require_non_empty_string(section.get("file"), f"{section_name}.file")
    resolved_root = _resolve_path(base_path, root_dir)
    if not resolved_root.is_dir():
        raise ConfigurationError(f"{section_name}.root_dir is not a directory: {resolved_root}")
    return SchemaSource(root_dir=resolved_root, file_path=file_path)


def _parse_comparison_section(value: Any) -> str:
    if value is None:
        return COMPARE_ALL
    section = _require_mapping(value, "comparison")
    entity = section.get("entity")
    if entity is None:
        return COMPARE_ALL
    return _require_non_empty_string(entity, "comparison.entity")


def _parse_report_section(value: Any, base_path: Path) -> ReportSettings:
    if value is None:
        return ReportSettings(formats=(), output_dir=None)
    section = _require_mapping(value, "report")
    formats = _normalize_formats(section.get("formats"))
    output_dir_raw = _optional_string(section.get("output_dir"), "report.output_dir")
    output_dir = _resolve_path(base_path, output_dir_raw) if output_dir_raw else None
    if formats and output_dir is None:
        raise ConfigurationError("report.output_dir is required when report.formats is set.")
    return ReportSettings(formats=formats, output_dir=output_dir)


def _normalize_formats(value: Any) -> tuple[ReportFormat, ...]:
    if value is None:
        return ()
    raw_values: Sequence[Any]
    if isinstance(value, str):
        raw_values = [item.strip() for item in value.split(",")]
    elif isinstance(value, Sequence):
        raw_values = value
    else:
        raise ConfigurationError("report.formats must be a string or list of strings.")

    formats: list[ReportFormat] = []
    for item in raw_values:
        if not isinstance(item, str):
            raise ConfigurationError("report.formats entries must be strings.")
        stripped = item.strip().lower()
        if not stripped:
            continue
        try:
            report_format = ReportFormat(stripped)
        except ValueError as exc:
            allowed = ", ".join(member.value for member in ReportFormat)
            raise ConfigurationError(
                f"Unsupported report format '{stripped}' (expected one of: {allowed})."
            ) from exc
        if report_format not in formats:
            formats.append(report_format)
    return tuple(formats)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
