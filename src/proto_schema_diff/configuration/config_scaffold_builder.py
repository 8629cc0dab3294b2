"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "schema-diff.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Comparison configuration template for proto-schema-diff.
# Replace every <REQUIRED> placeholder before running `proto-schema-diff run`.
# Replace <OPTIONAL> placeholders only when your setup needs them.
# Relative paths are resolved against the directory of this file.

before:
  # Import root and schema file (.proto source or serialized descriptor set).
  root_dir: "<REQUIRED>"
  file: "<REQUIRED>"

after:
  root_dir: "<REQUIRED>"
  file: "<REQUIRED>"

comparison:
  # Fully qualified message or enum name; "." compares every top-level type.
  entity: "."

report:
  # Any of: text, json, xlsx. Leave commented out to only print the report.
  # formats:
  #   - "<OPTIONAL>"
  # output_dir: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML comparison configuration template with inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder comparison configuration to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
