"""CLI smoke tests."""

from click.testing import CliRunner
from proto_schema_diff.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "compare" in result.output
    assert "run" in result.output
    assert "generate-config" in result.output


def test_compare_help_documents_dot_name() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["compare", "--help"])

    assert result.exit_code == 0
    assert "ROOT_DIR_A FILE_A ROOT_DIR_B FILE_B [NAME]" in result.output
    assert '"."' in result.output
