"""
Extract equation bodies and macro definitions from a LaTeX document.

This module provides functionality to:
- Find every \\begin{equation} ... \\end{equation} block in document order
- Collect the user's macro declaration lines (\\newcommand and friends)

Only the plain `equation` environment is recognised. An opening marker with
no closing marker is skipped silently.
"""

import re

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .errors import DocumentReadError


@dataclass(frozen=True)
class Equation:
    """
    One equation found in a document.

    Attributes:
        index: Zero-based position in the document; used as the file stem
        body: Text strictly between the begin/end markers, stripped
    """
    index: int
    body: str

    @property
    def stem(self) -> str:
        return str(self.index)


@dataclass(frozen=True)
class ExtractionResult:
    equations: List[Equation] = field(default_factory=list)
    macros: List[str] = field(default_factory=list)


# The body may not contain another opener, so an unclosed \begin{equation}
# never pairs with a later block's \end{equation}.
EQUATION_PATTERN = re.compile(
    r"\\begin\{equation\}((?:(?!\\begin\{equation\}).)*?)\\end\{equation\}",
    re.DOTALL,
)

MACRO_TOKENS = (
    "newcommand",
    "renewcommand",
    "providecommand",
    "DeclareMathOperator",
)

MACRO_PATTERN = re.compile(
    r"^[ \t]*\\(?:" + "|".join(MACRO_TOKENS) + r")(?![A-Za-z@]).*$",
    re.MULTILINE,
)


def extract_equations(document_text: str) -> List[Equation]:
    """
    Find all equation environments in a document.

    Args:
        document_text: Raw contents of the .tex file

    Returns:
        Equations in document order, indexed from 0

    Examples:
        >>> extract_equations(r"a \\begin{equation} x = 1 \\end{equation}")
        [Equation(index=0, body='x = 1')]
    """
    return [
        Equation(index=index, body=match.group(1).strip())
        for index, match in enumerate(EQUATION_PATTERN.finditer(document_text))
    ]


def extract_macros(document_text: str) -> List[str]:
    """
    Collect macro declaration lines, verbatim and in document order.

    A line qualifies when a declaration token (\\newcommand, \\renewcommand,
    \\providecommand, \\DeclareMathOperator, or a starred form) is its first
    non-blank content. Surrounding whitespace is trimmed; the rest of the
    line is kept as-is.
    """
    return [match.group(0).strip() for match in MACRO_PATTERN.finditer(document_text)]


def extract(document_text: str) -> ExtractionResult:
    """Extract both the equations and the macro definitions of a document."""
    return ExtractionResult(
        equations=extract_equations(document_text),
        macros=extract_macros(document_text),
    )


def read_document(tex_file: Path) -> str:
    """
    Read a .tex document.

    Raises:
        DocumentReadError: If the file is missing or cannot be read
    """
    tex_file = Path(tex_file)
    try:
        return tex_file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise DocumentReadError(tex_file, str(e)) from e
