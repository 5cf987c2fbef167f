"""
Per-document run log.

Every status line is echoed to the console and appended to a log file inside
the document's output directory. One RunLog belongs to one document; open it
when processing starts and close it when processing ends.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

import typer


class RunLog:
    """
    Console + file mirror for the status lines of one document.

    Usage:
        with RunLog(output_dir / "tex2svg_log.txt") as log:
            log.echo("Output directory: out")
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._handle: Optional[TextIO] = None

    def open(self) -> "RunLog":
        if self._handle is None:
            self._handle = self.path.open("a", encoding="utf-8")
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    def __enter__(self) -> "RunLog":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def echo(self, message: str = "", err: bool = False) -> None:
        """Print a status line and append it to the log file."""
        typer.echo(message, err=err)
        if self._handle is not None:
            self._handle.write(message + "\n")
            self._handle.flush()

    def start(self, now: Optional[datetime] = None) -> None:
        """Write the log header with the start timestamp."""
        now = now or datetime.now()
        self.echo("")
        self.echo(f"Logging all displays to: {self.path}")
        self.echo(f"Log started at: {now.strftime('%Y-%m-%d %H:%M:%S')}")
        self.echo("")
