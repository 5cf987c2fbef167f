"""
Runtime configuration for tex2svg.

Settings are read from the environment (a local .env file is loaded first)
and can be overridden field by field from the command line.

Environment variables:
    TEX2SVG_PDFLATEX           pdflatex executable (default: pdflatex)
    INKSCAPE                   explicit Inkscape executable, tried first
    TEX2SVG_INKSCAPE           bare Inkscape command (default: inkscape)
    TEX2SVG_INKSCAPE_FALLBACK  absolute Inkscape path tried last
    TEX2SVG_TIMEOUT            seconds before an external tool is killed
    TEX2SVG_LOG_NAME           name of the run log inside the output directory
"""

import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import load_dotenv


DEFAULT_PDFLATEX = "pdflatex"
DEFAULT_INKSCAPE = "inkscape"
DEFAULT_INKSCAPE_FALLBACK = r"C:\Program Files\Inkscape\bin\inkscape.exe"
DEFAULT_LOG_NAME = "tex2svg_log.txt"


@dataclass(frozen=True)
class Settings:
    """
    Tool paths and run options shared by every document in a run.

    Attributes:
        pdflatex: Typesetter executable
        inkscape: Bare Inkscape command looked up on PATH
        inkscape_fallback: Fixed installation path tried when the bare command fails
        inkscape_override: Explicit Inkscape path, tried before anything else
        timeout: Seconds to wait for one external tool call (None waits forever)
        log_name: File name of the run log inside each output directory
        show_progress: Whether to draw tqdm progress bars
    """
    pdflatex: str = DEFAULT_PDFLATEX
    inkscape: str = DEFAULT_INKSCAPE
    inkscape_fallback: str = DEFAULT_INKSCAPE_FALLBACK
    inkscape_override: Optional[str] = None
    timeout: Optional[float] = None
    log_name: str = DEFAULT_LOG_NAME
    show_progress: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and .env, if present)."""
        load_dotenv()

        return cls(
            pdflatex=os.getenv("TEX2SVG_PDFLATEX") or DEFAULT_PDFLATEX,
            inkscape=os.getenv("TEX2SVG_INKSCAPE") or DEFAULT_INKSCAPE,
            inkscape_fallback=os.getenv("TEX2SVG_INKSCAPE_FALLBACK") or DEFAULT_INKSCAPE_FALLBACK,
            inkscape_override=os.getenv("INKSCAPE") or None,
            timeout=_parse_timeout(os.getenv("TEX2SVG_TIMEOUT")),
            log_name=os.getenv("TEX2SVG_LOG_NAME") or DEFAULT_LOG_NAME,
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"TEX2SVG_TIMEOUT must be a number of seconds, got {raw!r}")
    if timeout <= 0:
        raise ValueError(f"TEX2SVG_TIMEOUT must be positive, got {raw!r}")
    return timeout
