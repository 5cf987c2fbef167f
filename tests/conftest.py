"""Shared fixtures: fake pdflatex / Inkscape executables written to tmp_path."""

import os
import stat
import sys
import textwrap
from dataclasses import dataclass
from pathlib import Path

import pytest


posix_only = pytest.mark.skipif(os.name == "nt", reason="fake tools are shebang scripts")


FAKE_PDFLATEX = '''\
#!{python}
import sys
from pathlib import Path

args = sys.argv[1:]
with open({calls!r}, "a", encoding="utf-8") as f:
    f.write(" ".join(args) + "\\n")

if {broken!r}:
    print("pdflatex: broken installation")
    sys.exit(1)

if args == ["--version"]:
    print("pdfTeX 3.141592653 (fake)")
    sys.exit(0)

out_dir = Path(args[args.index("-output-directory") + 1])
unit = Path(args[-1])
source = unit.read_text(encoding="utf-8")
if "\\\\undefinedcontrolsequence" in source:
    print("! Undefined control sequence.")
    print("l.7 \\\\undefinedcontrolsequence")
    sys.exit(1)

(out_dir / (unit.stem + ".pdf")).write_bytes(b"%PDF-1.5 fake\\n" + source.encode("utf-8"))
print("Output written on " + unit.stem + ".pdf")
'''


FAKE_INKSCAPE = '''\
#!{python}
import sys
from pathlib import Path

args = sys.argv[1:]
with open({calls!r}, "a", encoding="utf-8") as f:
    f.write(" ".join(args) + "\\n")

if args == ["--version"]:
    print("Inkscape 1.3 (fake)")
    sys.exit(0)

target = next(a.split("=", 1)[1] for a in args if a.startswith("--export-filename="))
pdf = Path(args[-1])
data = pdf.read_bytes()
if b"corrupt" in data:
    print("** (inkscape): poppler could not open " + str(pdf))
    sys.exit(1)
Path(target).write_bytes(b"<svg>" + data + b"</svg>")
'''


@dataclass
class FakeTool:
    path: Path
    calls_file: Path

    @property
    def calls(self):
        if not self.calls_file.exists():
            return []
        return self.calls_file.read_text(encoding="utf-8").splitlines()

    def reset(self):
        if self.calls_file.exists():
            self.calls_file.unlink()


def _write_script(path: Path, template: str, **values) -> Path:
    path.write_text(template.format(python=sys.executable, **values), encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def make_pdflatex(directory: Path, name: str = "pdflatex", broken: bool = False) -> FakeTool:
    directory.mkdir(parents=True, exist_ok=True)
    calls = directory / f"{name}.calls"
    script = _write_script(directory / name, FAKE_PDFLATEX, calls=str(calls), broken=broken)
    return FakeTool(path=script, calls_file=calls)


def make_inkscape(directory: Path, name: str = "inkscape") -> FakeTool:
    directory.mkdir(parents=True, exist_ok=True)
    calls = directory / f"{name}.calls"
    script = _write_script(directory / name, FAKE_INKSCAPE, calls=str(calls))
    return FakeTool(path=script, calls_file=calls)


@pytest.fixture
def tools_dir(tmp_path):
    return tmp_path / "bin"


@pytest.fixture
def fake_pdflatex(tools_dir):
    return make_pdflatex(tools_dir)


@pytest.fixture
def fake_inkscape(tools_dir):
    return make_inkscape(tools_dir)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """A clean working directory, so default output folders land in tmp_path."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work


SCENARIO_DOCUMENT = (
    "Some text \\begin{equation} x = y + 1 \\end{equation} more text "
    "\\begin{equation} a^2+b^2=c^2 \\end{equation}"
)


MACRO_DOCUMENT = textwrap.dedent(r"""
    \documentclass{article}
    \usepackage{amsmath}
    \newcommand{\R}{\mathbb{R}}
    \newcommand{\norm}[1]{\left\lVert #1 \right\rVert}
    \DeclareMathOperator{\tr}{tr}
    \begin{document}
    Vectors live in $\R^n$.
    \begin{equation}
        \norm{x} \in \R
    \end{equation}
    and
    \begin{equation}
        \begin{aligned}
            \tr(A) &= \sum_i A_{ii}
        \end{aligned}
    \end{equation}
    \end{document}
""")
