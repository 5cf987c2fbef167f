"""
Build standalone, single-equation LaTeX documents.

Each compilation unit carries a fixed preamble, every macro definition of the
source document and exactly one equation, with numbering suppressed so the
rendered artifact shows only the mathematics.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from pylatexenc.latexnodes import parsers as latex_parsers
from pylatexenc.latexnodes.nodes import LatexEnvironmentNode
from pylatexenc.latexwalker import LatexWalker, LatexWalkerError

from .equation_extractor import Equation


UNIT_SUFFIX = ".tex"

PREAMBLE = (
    r"\documentclass[preview,varwidth]{standalone}",
    r"\usepackage{amsmath,amsfonts}",
    r"\usepackage[noabbrev]{cleveref}",
)


@dataclass(frozen=True)
class CompilationUnit:
    """
    A compilation unit written to disk.

    Attributes:
        equation: The equation it renders
        source: Full LaTeX source of the unit
        path: Location of the written .tex file
    """
    equation: Equation
    source: str
    path: Path

    @property
    def pdf_path(self) -> Path:
        return self.path.with_suffix(".pdf")


def has_nested_environment(body: str) -> bool:
    """
    Check whether an equation body opens an environment of its own.

    Bodies such as ``\\begin{aligned} ... \\end{aligned}`` cannot sit inside
    inline math, so they get an equation wrapper instead.
    """
    parsed = _safe_parse(body)
    if parsed is None:
        return "\\begin{" in body
    return any(isinstance(node, LatexEnvironmentNode) for node in _iter_nodes(parsed))


def build_unit_source(equation: Equation, macros: Sequence[str]) -> str:
    """
    Build the LaTeX source of a single-equation document.

    Args:
        equation: Equation to render
        macros: Macro definition lines, kept verbatim and in order

    Returns:
        Complete LaTeX source, newline-terminated
    """
    lines = list(PREAMBLE)
    lines.extend(macro.strip() for macro in macros)
    lines.append(r"\begin{document}")

    if has_nested_environment(equation.body):
        lines.extend([r"\begin{equation}", equation.body, r"\notag", r"\end{equation}"])
    else:
        lines.extend([r"\(", equation.body, r"\notag", r"\)"])

    lines.append(r"\end{document}")
    return "\n".join(lines) + "\n"


def write_unit(equation: Equation, macros: Sequence[str], output_dir: Path) -> CompilationUnit:
    """Write ``<output_dir>/<index>.tex``, replacing any earlier version."""
    source = build_unit_source(equation, macros)
    path = Path(output_dir) / f"{equation.stem}{UNIT_SUFFIX}"
    path.write_text(source, encoding="utf-8")
    return CompilationUnit(equation=equation, source=source, path=path)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_parse(body: str) -> Optional[list]:
    try:
        walker = LatexWalker(body)
        nodes, _ = walker.parse_content(latex_parsers.LatexGeneralNodesParser())
    except (LatexWalkerError, ValueError):
        return None
    if nodes is None:
        return []
    return list(nodes.nodelist) if hasattr(nodes, "nodelist") else [nodes]


def _iter_nodes(nodes: Iterable) -> Iterable:
    for node in nodes:
        if node is None:
            continue
        yield node

        child_list = getattr(node, "nodelist", None)
        if child_list:
            yield from _iter_nodes(child_list)

        nodeargd = getattr(node, "nodeargd", None)
        if nodeargd and getattr(nodeargd, "argnlist", None):
            for arg in nodeargd.argnlist:
                if hasattr(arg, "nodelist") and arg.nodelist:
                    yield from _iter_nodes(arg.nodelist)
