"""CLI tests using Typer's CliRunner."""

import pytest
from typer.testing import CliRunner

from tex2svg import config
from tex2svg.main import app

from .conftest import SCENARIO_DOCUMENT, posix_only


runner = CliRunner()

pytestmark = posix_only


@pytest.fixture
def tool_env(monkeypatch, tmp_path, fake_pdflatex, fake_inkscape):
    monkeypatch.setattr(config, "load_dotenv", lambda: False)
    monkeypatch.delenv("INKSCAPE", raising=False)
    monkeypatch.delenv("TEX2SVG_TIMEOUT", raising=False)
    monkeypatch.delenv("TEX2SVG_LOG_NAME", raising=False)
    monkeypatch.setenv("TEX2SVG_PDFLATEX", str(fake_pdflatex.path))
    monkeypatch.setenv("TEX2SVG_INKSCAPE", str(fake_inkscape.path))
    monkeypatch.setenv("TEX2SVG_INKSCAPE_FALLBACK", str(tmp_path / "missing-inkscape"))
    return monkeypatch


def test_single_file(tool_env, workdir):
    (workdir / "eqs.tex").write_text(SCENARIO_DOCUMENT, encoding="utf-8")

    result = runner.invoke(app, ["eqs.tex", "--quiet"])

    assert result.exit_code == 0, result.output
    assert "Equation 1 compiled successfully." in result.output
    assert "Program completed successfully." in result.output
    assert (workdir / "eqs" / "1.svg").exists()


def test_single_file_with_output_dir(tool_env, workdir):
    (workdir / "eqs.tex").write_text(SCENARIO_DOCUMENT, encoding="utf-8")

    result = runner.invoke(app, ["eqs.tex", "svg_output", "-q"])

    assert result.exit_code == 0, result.output
    assert (workdir / "svg_output" / "0.svg").exists()
    assert not (workdir / "eqs").exists()


def test_batch_mode(tool_env, workdir):
    (workdir / "a.tex").write_text(SCENARIO_DOCUMENT, encoding="utf-8")
    (workdir / "b.tex").write_text(SCENARIO_DOCUMENT, encoding="utf-8")

    result = runner.invoke(app, ["-q"])

    assert result.exit_code == 0, result.output
    assert "Processing input files: a.tex, b.tex" in result.output
    assert "Succeeded: 2" in result.output
    assert (workdir / "a" / "1.svg").exists()
    assert (workdir / "b" / "1.svg").exists()


def test_batch_mode_without_tex_files(tool_env, workdir):
    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert "No .tex files found" in result.output


def test_missing_input_file_exits_nonzero(tool_env, workdir):
    result = runner.invoke(app, ["missing.tex", "-q"])

    assert result.exit_code == 1
    assert "Could not read input file" in result.output


def test_cli_inkscape_override(tool_env, workdir, tmp_path):
    tool_env.setenv("TEX2SVG_INKSCAPE", str(tmp_path / "not-here"))
    (workdir / "eqs.tex").write_text(SCENARIO_DOCUMENT, encoding="utf-8")

    broken = runner.invoke(app, ["eqs.tex", "-q"])
    assert "Failed to run Inkscape." in broken.output
    assert not (workdir / "eqs" / "0.svg").exists()

    inkscape = str(tmp_path / "bin" / "inkscape")
    fixed = runner.invoke(app, ["eqs.tex", "-q", "--inkscape", inkscape])
    assert fixed.exit_code == 0, fixed.output
    assert (workdir / "eqs" / "0.svg").exists()


def test_invalid_timeout_env(tool_env, workdir):
    tool_env.setenv("TEX2SVG_TIMEOUT", "never")

    result = runner.invoke(app, ["eqs.tex"])

    assert result.exit_code == 1
    assert "TEX2SVG_TIMEOUT" in result.output
