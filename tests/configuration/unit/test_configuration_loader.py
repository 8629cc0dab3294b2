"""Configuration loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from proto_schema_diff.configuration.loader import ConfigurationError, load_configuration
from proto_schema_diff.results_writing.report_models import ReportFormat


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def _schema_roots(tmp_path: Path) -> None:
    (tmp_path / "v1").mkdir()
    (tmp_path / "v2").mkdir()


def test_loads_yaml_configuration_with_defaults(tmp_path: Path) -> None:
    _schema_roots(tmp_path)
    config_path = _write_file(
        tmp_path / "schema-diff.yaml",
        """
before:
  root_dir: v1
  file: api/orders.proto
after:
  root_dir: v2
  file: api/orders.proto
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.before.root_dir == (tmp_path / "v1").resolve()
    assert configuration.before.file_path == "api/orders.proto"
    assert configuration.after.root_dir == (tmp_path / "v2").resolve()
    assert configuration.entity_name == "."
    assert configuration.report.formats == ()
    assert configuration.report.output_dir is None


def test_loads_json_configuration_with_entity_and_reports(tmp_path: Path) -> None:
    _schema_roots(tmp_path)
    config_path = _write_file(
        tmp_path / "schema-diff.json",
        json.dumps(
            {
                "before": {"root_dir": str(tmp_path / "v1"), "file": "a.proto"},
                "after": {"root_dir": str(tmp_path / "v2"), "file": "a.proto"},
                "comparison": {"entity": "shop.Order"},
                "report": {"formats": ["json", "XLSX", "json"], "output_dir": "reports"},
            }
        ),
    )

    configuration = load_configuration(config_path)

    assert configuration.entity_name == "shop.Order"
    assert configuration.report.formats == (ReportFormat.JSON, ReportFormat.XLSX)
    assert configuration.report.output_dir == (tmp_path / "reports").resolve()


def test_report_formats_accept_comma_separated_string(tmp_path: Path) -> None:
    _schema_roots(tmp_path)
    config_path = _write_file(
        tmp_path / "schema-diff.yaml",
        """
before: {root_dir: v1, file: a.proto}
after: {root_dir: v2, file: a.proto}
report:
  formats: "text, json"
  output_dir: out
""",
    )

    configuration = load_configuration(config_path)

    assert configuration.report.formats == (ReportFormat.TEXT, ReportFormat.JSON)


@pytest.mark.parametrize(
    ("contents", "message"),
    [
        ("after: {root_dir: v2, file: a.proto}", "Configuration section 'before' is required"),
        ("before: {root_dir: v1}\nafter: {root_dir: v2, file: a.proto}", "before.file"),
        (
            "before: {root_dir: v1, file: a.proto}\nafter: {root_dir: v3, file: a.proto}",
            "after.root_dir is not a directory",
        ),
        (
            "before: {root_dir: v1, file: a.proto}\n"
            "after: {root_dir: v2, file: a.proto}\n"
            "comparison: {entity: '  '}",
            "comparison.entity must not be empty",
        ),
        (
            "before: {root_dir: v1, file: a.proto}\n"
            "after: {root_dir: v2, file: a.proto}\n"
            "report: {formats: [pdf], output_dir: out}",
            "Unsupported report format 'pdf'",
        ),
        (
            "before: {root_dir: v1, file: a.proto}\n"
            "after: {root_dir: v2, file: a.proto}\n"
            "report: {formats: [json]}",
            "report.output_dir is required",
        ),
        (
            "before: {root_dir: v1, file: a.proto}\n"
            "after: {root_dir: v2, file: a.proto}\n"
            "report: {formats: 3, output_dir: out}",
            "report.formats must be a string or list",
        ),
    ],
)
def test_invalid_sections_raise_configuration_error(
    tmp_path: Path, contents: str, message: str
) -> None:
    _schema_roots(tmp_path)
    config_path = _write_file(tmp_path / "schema-diff.yaml", contents)

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Configuration file not found"):
        load_configuration(tmp_path / "missing.yaml")


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "schema-diff.yaml", "- just\n- a list\n")

    with pytest.raises(ConfigurationError, match="Configuration root must be a mapping"):
        load_configuration(config_path)


def test_unparseable_yaml_raises(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "schema-diff.yaml", "before: [unclosed\n")

    with pytest.raises(ConfigurationError, match="Failed to parse configuration file"):
        load_configuration(config_path)
