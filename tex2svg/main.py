import typer
from pathlib import Path
from typing import Optional

from .config import Settings
from .errors import Tex2SvgError
from .pipeline import Pipeline, find_tex_files

app = typer.Typer(
    name="tex2svg",
    help="Convert the LaTeX equations of a document to standalone PDF and SVG files",
    add_completion=False,
)


@app.command()
def convert(
    tex_file: Optional[Path] = typer.Argument(
        None,
        help="LaTeX file to process. If omitted, every .tex file in the current directory is processed"
    ),
    output_dir: Optional[Path] = typer.Argument(
        None,
        help="Output directory (default: a folder named after the input file)"
    ),
    pdflatex: Optional[str] = typer.Option(
        None,
        "--pdflatex",
        help="pdflatex executable (default: $TEX2SVG_PDFLATEX or 'pdflatex')"
    ),
    inkscape: Optional[str] = typer.Option(
        None,
        "--inkscape",
        help="Inkscape executable, tried before the command on PATH and the fallback path"
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout", "-t",
        min=0.1,
        help="Seconds to wait for each pdflatex/Inkscape call (default: wait forever)"
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Hide progress bars (status lines are still printed and logged)"
    ),
):
    """
    Extract every \\begin{equation} ... \\end{equation} block, compile each one
    to PDF with pdflatex and convert the PDFs to SVG with Inkscape.

    Examples:
        tex2svg
        tex2svg equations.tex
        tex2svg equations.tex svg_output --inkscape /opt/inkscape/bin/inkscape
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    settings = settings.with_overrides(
        pdflatex=pdflatex,
        inkscape_override=inkscape,
        timeout=timeout,
    )
    if quiet:
        settings = settings.with_overrides(show_progress=False)

    pipeline = Pipeline(settings)

    if tex_file is not None:
        try:
            pipeline.process_document(tex_file, output_dir)
        except Tex2SvgError as e:
            typer.echo(f"\n✗ Failed to process {tex_file}: {e}", err=True)
            raise typer.Exit(1)
        return

    tex_files = find_tex_files(Path.cwd())
    if not tex_files:
        typer.echo("No .tex files found in the current directory.", err=True)
        raise typer.Exit(1)

    typer.echo(f"Processing input files: {', '.join(p.name for p in tex_files)}")
    batch = pipeline.process_directory(Path.cwd(), output_root=output_dir)

    typer.echo(f"\n{'=' * 70}")
    typer.echo("Processing Complete")
    typer.echo(f"{'=' * 70}")
    typer.echo(f"Total files: {len(tex_files)}")
    typer.echo(f"Succeeded: {len(batch.reports)}")
    typer.echo(f"Failed: {len(batch.failures)}")

    if batch.failures:
        typer.echo(f"\n✗ Failed files:", err=True)
        for path, error in batch.failures:
            typer.echo(f"  - {path.name}: {error}", err=True)
        raise typer.Exit(1)


def main():
    app()


if __name__ == "__main__":
    main()
