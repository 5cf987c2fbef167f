"""
Fatal error types for the tex2svg pipeline.

Only three conditions stop the processing of a document: the output directory
cannot be created, the run log inside it cannot be opened, or the input
document cannot be read. Everything that goes wrong inside an external tool
is reported as a value (see tool_runner.py).
"""

from pathlib import Path


class Tex2SvgError(Exception):
    """Base class for errors that abort the processing of one document."""


class OutputDirectoryError(Tex2SvgError):
    """Raised when the output directory for a document cannot be created."""

    def __init__(self, output_dir: Path, reason: str):
        self.output_dir = Path(output_dir)
        self.reason = reason
        super().__init__(f"Could not create output directory {self.output_dir}: {reason}")


class DocumentReadError(Tex2SvgError):
    """Raised when the input .tex document cannot be read."""

    def __init__(self, tex_file: Path, reason: str):
        self.tex_file = Path(tex_file)
        self.reason = reason
        super().__init__(f"Could not read input file {self.tex_file}: {reason}")


class RunLogError(Tex2SvgError):
    """Raised when the run log inside the output directory cannot be opened."""

    def __init__(self, log_file: Path, reason: str):
        self.log_file = Path(log_file)
        self.reason = reason
        super().__init__(f"Could not open run log {self.log_file}: {reason}")
