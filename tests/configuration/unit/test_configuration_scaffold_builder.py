"""Configuration scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from proto_schema_diff.configuration import (
    build_placeholder_configuration,
    write_placeholder_configuration,
)


def test_placeholder_configuration_lists_every_section() -> None:
    content = build_placeholder_configuration()
    parsed = yaml.safe_load(content)

    assert set(parsed) == {"before", "after", "comparison", "report"}
    assert parsed["before"] == {"root_dir": "<REQUIRED>", "file": "<REQUIRED>"}
    assert parsed["comparison"] == {"entity": "."}
    assert parsed["report"] is None
    assert "<OPTIONAL>" in content


def test_write_placeholder_configuration_writes_file(tmp_path: Path) -> None:
    output = write_placeholder_configuration(tmp_path / "schema-diff.yaml")

    assert output == (tmp_path / "schema-diff.yaml").resolve()
    assert output.read_text(encoding="utf-8") == build_placeholder_configuration()


def test_write_placeholder_configuration_refuses_to_overwrite(tmp_path: Path) -> None:
    existing = tmp_path / "schema-diff.yaml"
    existing.write_text("keep me", encoding="utf-8")

    with pytest.raises(FileExistsError, match="Configuration file already exists"):
        write_placeholder_configuration(existing)
    assert existing.read_text(encoding="utf-8") == "keep me"
