"""
CLI Tests
=========
Command-level tests through click's CliRunner.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from gentxtsrc.cli import cli


DOCUMENT = (
    "@start\n"
    "@global {signperline: 60}\n"
    "@variable {varname: greeting, seq: RAWHEX, doxygen: Greeting}\n"
    "Hi\n"
    "@endvariable\n"
    "@end\n"
)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def document(tmp_path):
    path = tmp_path / "strings.txt"
    path.write_text(DOCUMENT)
    return path


class TestGenerateCommand:
    """Test the generate command."""

    def test_json_summary(self, runner, document, tmp_path):
        result = runner.invoke(cli, [
            "generate", str(document),
            "-H", str(tmp_path / "include"),
            "-S", str(tmp_path / "src"),
            "--json-output",
        ])

        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)
        assert summary[0]["source_file"] == "strings.txt"
        assert summary[0]["variables"] == ["greeting"]

        header = (tmp_path / "include" / "strings.h").read_text()
        source = (tmp_path / "src" / "strings.cpp").read_text()
        assert "/** Greeting */\nextern const char greeting[];\n" in header
        assert "const char greeting[] = {\n0x48,0x69 \\\n};\n" in source

    def test_output_type_option(self, runner, document, tmp_path):
        result = runner.invoke(cli, [
            "generate", str(document),
            "-H", str(tmp_path),
            "-S", str(tmp_path),
            "-t", "C",
            "-f", "texts",
            "--json-output",
        ])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "texts.c").exists()
        assert (tmp_path / "texts.h").exists()

    def test_ascii_error_exits(self, runner, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_bytes(
            b"@start\n@variable {varname: bad, seq: HEX}\n\xff\n@endvariable\n@end\n"
        )

        result = runner.invoke(cli, [
            "generate", str(path),
            "-H", str(tmp_path),
            "-S", str(tmp_path),
            "--log-level", "ERROR",
        ])

        assert result.exit_code == 1
        assert "ASCII error" in result.output
        assert not (tmp_path / "bad.h").exists()

    def test_invalid_output_type_exits(self, runner, document, tmp_path):
        result = runner.invoke(cli, [
            "generate", str(document),
            "-H", str(tmp_path),
            "-S", str(tmp_path),
            "-t", "java",
            "--log-level", "ERROR",
        ])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_check_declined(self, runner, document, tmp_path):
        result = runner.invoke(
            cli,
            [
                "generate", str(document),
                "-H", str(tmp_path),
                "-S", str(tmp_path),
                "--log-level", "ERROR",
            ],
            input="n\n",
        )

        assert result.exit_code == 0, result.output
        assert not (tmp_path / "strings.h").exists()

    def test_check_flag_writes_without_asking(self, runner, document, tmp_path):
        result = runner.invoke(cli, [
            "generate", str(document),
            "-H", str(tmp_path),
            "-S", str(tmp_path),
            "-C",
            "--log-level", "ERROR",
        ])

        assert result.exit_code == 0, result.output
        assert "Write these files?" not in result.output
        assert (tmp_path / "strings.h").exists()
        assert (tmp_path / "strings.cpp").exists()


class TestExtractCommand:
    """Test the extract command."""

    def test_json(self, runner, document):
        result = runner.invoke(cli, ["extract", str(document), "--json-output"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["options"] == {"signperline": "60"}
        assert data["variable_count"] == 1
        assert data["variables"][0]["line_number"] == 3
        assert data["variables"][0]["fields"]["content"] == "Hi\n"

    def test_tables(self, runner, document):
        result = runner.invoke(cli, ["extract", str(document)])

        assert result.exit_code == 0, result.output
        assert "signperline" in result.output


class TestEncodeCommand:
    """Test the encode command."""

    def test_prints_lines(self, runner, document):
        result = runner.invoke(cli, ["encode", str(document)])

        assert result.exit_code == 0, result.output
        assert "0x48,0x69" in result.output

    def test_ascii_error_names_file(self, runner, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_bytes(
            b"@start\n@variable {varname: bad, seq: ESC}\n\xff\n@endvariable\n@end\n"
        )

        result = runner.invoke(cli, ["encode", str(path)])

        assert result.exit_code == 1
        assert "ASCII error in: bad.txt in line: 2" in result.output
