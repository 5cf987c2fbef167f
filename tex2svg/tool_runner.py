"""
Run external command-line tools without letting failures escape.

This module handles:
- Invoking an executable and capturing its exit status and output
- Probing a tool with ``--version``
- Resolving a tool path from an ordered list of candidates
- The pdflatex and Inkscape command lines used by the pipeline
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union


LAUNCH_FAILED_STATUS = 127
TIMED_OUT_STATUS = 124


@dataclass(frozen=True)
class ToolResult:
    """Exit status and merged stdout/stderr of one tool invocation."""
    status: int
    output: str

    @property
    def ok(self) -> bool:
        return self.status == 0


@dataclass(frozen=True)
class ToolResolution:
    """A tool candidate that answered the version probe."""
    path: str
    probe: ToolResult


@dataclass(frozen=True)
class ToolUnavailable:
    """
    No candidate answered the version probe.

    Attributes:
        candidates: Every path that was probed, in order
        last_path: The last candidate, still used for best-effort calls
        probe: Result of the last probe
    """
    candidates: List[str]
    last_path: str
    probe: ToolResult


def run_tool(
    executable: str,
    arguments: Sequence[Union[str, Path]] = (),
    timeout: Optional[float] = None,
) -> ToolResult:
    """
    Run an executable and wait for it to exit.

    Never raises for tool problems: a program that cannot be started is
    reported with status 127 and a program killed after ``timeout`` seconds
    with status 124.

    Args:
        executable: Command name or path
        arguments: Command-line arguments
        timeout: Seconds to wait before killing the process (None waits forever)

    Returns:
        ToolResult with the exit status and the combined output
    """
    cmd = [str(executable)] + [str(arg) for arg in arguments]
    try:
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = _decode(e.output)
        return ToolResult(TIMED_OUT_STATUS, f"{partial}Timed out after {timeout} seconds: {' '.join(cmd)}")
    except OSError as e:
        return ToolResult(LAUNCH_FAILED_STATUS, f"Could not run {executable}: {e}")

    return ToolResult(proc.returncode, _decode(proc.stdout))


def probe_tool(executable: str, timeout: Optional[float] = None) -> ToolResult:
    """Check that a tool starts by asking for its version."""
    return run_tool(executable, ["--version"], timeout=timeout)


class ToolLocator:
    """
    Resolve a tool path by probing candidates in order.

    The usual setup is a bare command name (looked up on PATH) followed by a
    fixed installation path; an explicit override, when given, goes first.
    """

    def __init__(self, candidates: Sequence[Optional[str]], timeout: Optional[float] = None):
        self.candidates = [c for c in dict.fromkeys(candidates) if c]
        if not self.candidates:
            raise ValueError("ToolLocator needs at least one candidate")
        self.timeout = timeout

    def resolve(self) -> Union[ToolResolution, ToolUnavailable]:
        probe = None
        for candidate in self.candidates:
            probe = probe_tool(candidate, timeout=self.timeout)
            if probe.ok:
                return ToolResolution(path=candidate, probe=probe)
        return ToolUnavailable(candidates=list(self.candidates), last_path=self.candidates[-1], probe=probe)


def compile_to_pdf(
    pdflatex: str,
    unit_file: Path,
    output_dir: Path,
    timeout: Optional[float] = None,
) -> ToolResult:
    """Run ``pdflatex -output-directory <dir> <unit_file>``."""
    return run_tool(
        pdflatex,
        ["-output-directory", str(output_dir), str(unit_file)],
        timeout=timeout,
    )


def convert_pdf_to_svg(
    inkscape: str,
    pdf_file: Path,
    svg_file: Path,
    timeout: Optional[float] = None,
) -> ToolResult:
    """Run Inkscape's PDF import (poppler) and export the drawing as SVG."""
    return run_tool(
        inkscape,
        ["--pdf-poppler", "--export-type=svg", f"--export-filename={svg_file}", str(pdf_file)],
        timeout=timeout,
    )


def _decode(raw: Optional[bytes]) -> str:
    if not raw:
        return ""
    if isinstance(raw, str):
        return raw
    return raw.decode(errors="replace")
