"""Integration tests for the convert command"""

import pytest
from typer.testing import CliRunner

from mdteach.cli.cli import app
from mdteach.core.container import read_container


@pytest.fixture(name="runner")
def runner_fixture():
    return CliRunner()


@pytest.fixture(name="source")
def source_fixture(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "hello.md"
    path.write_text("# Hello\n\nWorld\n")
    return path


def test_convert_writes_container(runner, source, tmp_path):
    """A successful conversion exits 0 and writes a readable container."""
    output = tmp_path / "hello.teach"
    result = runner.invoke(app, [str(source), str(output)])
    assert result.exit_code == 0, result.output
    assert "Wrote 13 text byte(s)" in result.output
    assert read_container(output.read_bytes()).text == b"Hello\r\rWorld\r"


def test_convert_missing_arguments(runner, source):
    """Input and output are both required."""
    result = runner.invoke(app, [str(source)])
    assert result.exit_code != 0


def test_convert_missing_input(runner, tmp_path):
    """A nonexistent input file is rejected before conversion."""
    result = runner.invoke(app, [str(tmp_path / "nope.md"), str(tmp_path / "out.teach")])
    assert result.exit_code != 0
    assert not (tmp_path / "out.teach").exists()


def test_convert_unknown_option(runner, source, tmp_path):
    """Unknown flags are a usage error."""
    result = runner.invoke(app, ["-x", str(source), str(tmp_path / "out.teach")])
    assert result.exit_code != 0


def test_convert_debug_traces_events(runner, source, tmp_path):
    """-d prints the event trace to stderr."""
    result = runner.invoke(app, ["-d", str(source), str(tmp_path / "out.teach")])
    assert result.exit_code == 0, result.output
    assert "DOC {" in result.output
    assert "H (level=1) {" in result.output


def test_convert_null_character_fails(runner, tmp_path, monkeypatch):
    """A NUL in the input exits 1 with an error message."""
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "bad.md"
    source.write_text("a\x00b\n")
    result = runner.invoke(app, [str(source), str(tmp_path / "out.teach")])
    assert result.exit_code == 1
    assert "Null character" in result.output


def test_convert_table_with_gfm_preset_fails(runner, tmp_path, monkeypatch):
    """Tables parsed by the gfm-like preset abort the conversion."""
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "table.md"
    source.write_text("| a |\n|---|\n| b |\n")
    result = runner.invoke(app, ["--parser-config", "gfm-like", str(source), str(tmp_path / "out.teach")])
    assert result.exit_code == 1
    assert "Invalid block type (table)" in result.output


def test_convert_bad_config(runner, source, tmp_path):
    """An invalid config.yaml exits 1."""
    (tmp_path / "config.yaml").write_text("hr_width: -1\n")
    result = runner.invoke(app, [str(source), str(tmp_path / "out.teach")])
    assert result.exit_code == 1
    assert "Error:" in result.output
