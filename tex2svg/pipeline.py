"""
Drive the equation -> PDF -> SVG pipeline for one document or a directory.

For a document the pipeline:
1. Creates the output directory (named after the document unless given)
2. Opens the run log inside it
3. Checks that pdflatex starts
4. Extracts equations and macro definitions
5. Writes one compilation unit per equation and compiles it, skipping
   equations whose PDF already exists
6. Locates Inkscape
7. Converts every PDF in the output directory to SVG
8. Closes the run log

Tool failures are reported and never stop the run. Only a missing output
directory, an unusable run log or an unreadable document aborts a document.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from tqdm import tqdm

from .compilation_unit import CompilationUnit, write_unit
from .config import Settings
from .equation_extractor import extract, read_document
from .errors import OutputDirectoryError, RunLogError, Tex2SvgError
from .run_log import RunLog
from .tool_runner import (
    ToolLocator,
    ToolUnavailable,
    compile_to_pdf,
    convert_pdf_to_svg,
    probe_tool,
)


@dataclass
class DocumentReport:
    """Outcome of processing one document."""
    tex_file: Path
    output_dir: Path
    log_file: Path
    typesetter_ok: bool = False
    vector_tool_ok: bool = False
    equation_count: int = 0
    macro_count: int = 0
    compiled: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    compile_failed: List[int] = field(default_factory=list)
    converted: List[Path] = field(default_factory=list)
    convert_failed: List[Path] = field(default_factory=list)


@dataclass
class BatchReport:
    """Outcome of processing every document in a directory."""
    reports: List[DocumentReport] = field(default_factory=list)
    failures: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def default_output_dir(tex_file: Path) -> Path:
    """Output directory named after the document stem, relative to the working directory."""
    return Path(Path(tex_file).stem)


def svg_path_for(pdf_file: Path) -> Path:
    return Path(pdf_file).with_suffix(".svg")


def find_tex_files(directory: Path) -> List[Path]:
    """All .tex files directly inside ``directory``, sorted by name."""
    return sorted(p for p in Path(directory).glob("*.tex") if p.is_file())


def find_pdf_files(directory: Path) -> List[Path]:
    """All PDFs directly inside ``directory``, sorted by name."""
    return sorted(p for p in Path(directory).glob("*.pdf") if p.is_file())


class Pipeline:
    """Runs the conversion for documents with one set of settings."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    # ------------------------------------------------------------------
    # Batch mode
    # ------------------------------------------------------------------

    def process_directory(
        self,
        directory: Optional[Path] = None,
        output_root: Optional[Path] = None,
    ) -> BatchReport:
        """
        Process every .tex file in a directory, one after the other.

        Args:
            directory: Where to look for .tex files (default: working directory)
            output_root: Parent for the per-document output directories
                (default: each document's stem in the working directory)

        Returns:
            BatchReport with one DocumentReport per finished document and the
            fatal error of every document that could not be processed
        """
        directory = Path(directory) if directory is not None else Path.cwd()
        batch = BatchReport()

        for tex_file in find_tex_files(directory):
            output_dir = None
            if output_root is not None:
                output_dir = Path(output_root) / tex_file.stem
            try:
                batch.reports.append(self.process_document(tex_file, output_dir))
            except Tex2SvgError as e:
                batch.failures.append((tex_file, str(e)))

        return batch

    # ------------------------------------------------------------------
    # Single document
    # ------------------------------------------------------------------

    def process_document(self, tex_file: Path, output_dir: Optional[Path] = None) -> DocumentReport:
        """
        Convert every equation of one document to PDF and SVG.

        Args:
            tex_file: Input .tex document
            output_dir: Output directory (default: named after the document)

        Returns:
            DocumentReport describing what succeeded and what failed

        Raises:
            OutputDirectoryError: If the output directory cannot be created
            RunLogError: If the run log cannot be opened
            DocumentReadError: If the document cannot be read
        """
        tex_file = Path(tex_file)
        output_dir = Path(output_dir) if output_dir is not None else default_output_dir(tex_file)

        created = not output_dir.is_dir()
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(output_dir, str(e)) from e

        report = DocumentReport(
            tex_file=tex_file,
            output_dir=output_dir,
            log_file=output_dir / self.settings.log_name,
        )

        try:
            log = RunLog(report.log_file).open()
        except OSError as e:
            raise RunLogError(report.log_file, str(e)) from e

        with log:
            log.start()
            log.echo(f"Processing input file: {tex_file}")
            if created:
                log.echo(f"Created output directory: {output_dir}")
            log.echo(f"Output directory: {output_dir}")

            report.typesetter_ok = self._check_typesetter(log)

            try:
                document_text = read_document(tex_file)
            except Tex2SvgError as e:
                log.echo(f"Error: {e}", err=True)
                raise

            extraction = extract(document_text)
            report.equation_count = len(extraction.equations)
            report.macro_count = len(extraction.macros)
            log.echo(
                f"Found {report.equation_count} equation(s) and "
                f"{report.macro_count} macro definition(s)."
            )

            for equation in tqdm(
                extraction.equations,
                desc="Compiling equations",
                unit="eq",
                disable=not self.settings.show_progress,
            ):
                try:
                    unit = write_unit(equation, extraction.macros, output_dir)
                except OSError as e:
                    log.echo(f"Failed to write equation file {equation.stem}.tex. Error: {e}", err=True)
                    report.compile_failed.append(equation.index)
                    continue
                self._compile(unit, report, log)

            inkscape = self._locate_inkscape(report, log)
            self._convert_all(inkscape, report, log)

            log.echo("Program completed successfully.")

        return report

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _check_typesetter(self, log: RunLog) -> bool:
        probe = probe_tool(self.settings.pdflatex, timeout=self.settings.timeout)
        if probe.ok:
            log.echo(f"pdflatex is working. \n {probe.output}")
        else:
            log.echo(f"Failed to run pdflatex. Error: {probe.output}", err=True)
        return probe.ok

    def _compile(self, unit: CompilationUnit, report: DocumentReport, log: RunLog) -> None:
        index = unit.equation.index
        stem = unit.equation.stem

        # No staleness check: an existing PDF wins even if the equation changed.
        if unit.pdf_path.exists():
            log.echo(f"Skipping compilation for equation {stem}.pdf. PDF file already exists.")
            report.skipped.append(index)
            return

        result = compile_to_pdf(
            self.settings.pdflatex,
            unit.path.resolve(),
            unit.path.parent.resolve(),
            timeout=self.settings.timeout,
        )
        if not result.ok:
            log.echo(f"Failed to run pdflatex. Error: {result.output}", err=True)
            report.compile_failed.append(index)
            return

        log.echo(f"Equation {stem} compiled successfully.")
        report.compiled.append(index)

    def _locate_inkscape(self, report: DocumentReport, log: RunLog) -> str:
        settings = self.settings
        candidates = [settings.inkscape_override, settings.inkscape, settings.inkscape_fallback]
        resolution = ToolLocator(candidates, timeout=settings.timeout).resolve()

        if isinstance(resolution, ToolUnavailable):
            log.echo(
                "Failed to run Inkscape. Please provide the correct path to the "
                f"Inkscape executable. Tried: {', '.join(resolution.candidates)}",
                err=True,
            )
            log.echo(f"Last error: {resolution.probe.output}", err=True)
            self._report_inkscape_path(resolution.last_path, log)
            report.vector_tool_ok = False
            return resolution.last_path

        if resolution.path == settings.inkscape_fallback and resolution.path != settings.inkscape:
            log.echo(f'The "{settings.inkscape}" command is not available in the system path.')
            log.echo(f'Fallback to absolute path: "{resolution.path}"')
        self._report_inkscape_path(resolution.path, log)
        log.echo(f"Inkscape executable is working. Output: {resolution.probe.output}")
        report.vector_tool_ok = True
        return resolution.path

    def _report_inkscape_path(self, inkscape: str, log: RunLog) -> None:
        if shutil.which(inkscape) or Path(inkscape).is_file():
            log.echo("Inkscape executable found.")
        else:
            log.echo("Inkscape executable not found at the specified path.", err=True)

    def _convert_all(self, inkscape: str, report: DocumentReport, log: RunLog) -> None:
        # Every PDF on disk, including ones from earlier runs or placed by hand.
        pdf_files = find_pdf_files(report.output_dir)

        for pdf_file in tqdm(
            pdf_files,
            desc="Converting to SVG",
            unit="pdf",
            disable=not self.settings.show_progress,
        ):
            svg_file = svg_path_for(pdf_file)
            result = convert_pdf_to_svg(inkscape, pdf_file, svg_file, timeout=self.settings.timeout)
            if not result.ok:
                log.echo(f"Failed to convert {pdf_file} to SVG. Error: {result.output}", err=True)
                report.convert_failed.append(pdf_file)
                continue

            log.echo(f"Successfully converted {pdf_file} to SVG.")
            log.echo(f"Output SVG file: {svg_file}")
            report.converted.append(svg_file)
