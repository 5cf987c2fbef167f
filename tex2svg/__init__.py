"""
tex2svg - Turn the equations of a LaTeX document into standalone SVG files.

This package provides tools to:
- Extract \\begin{equation} blocks and macro definitions from a .tex file
- Build one self-contained LaTeX document per equation
- Compile each document to PDF with pdflatex
- Convert the PDFs to SVG with Inkscape
"""

__version__ = "0.1.0"
