"""Boundary tests for comparison core dependencies."""

from __future__ import annotations

from pathlib import Path


def _project_root() -> Path:
    return Path(__file__).resolve().parents[3]


def test_comparison_core_does_not_depend_on_loading_or_writing() -> None:
    comparison_dir = _project_root() / "src" / "proto_schema_diff" / "comparison"
    core_modules = (
        comparison_dir / "comparison_models.py",
        comparison_dir / "comparator.py",
    )
    forbidden_import_fragments = (
        "google.protobuf",
        "proto_schema_diff.schema_management.schema_loading",
        "proto_schema_diff.results_writing",
        "openpyxl",
        "subprocess",
    )

    for module_path in core_modules:
        text = module_path.read_text(encoding="utf-8")
        for fragment in forbidden_import_fragments:
            assert fragment not in text, f"Forbidden core dependency in {module_path}: {fragment}"
