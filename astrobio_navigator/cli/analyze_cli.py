# astrobio_navigator/cli/analyze_cli.py

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from astrobio_navigator.cli.catalog_cli import load_snapshot
from astrobio_navigator.config.settings import get_settings
from astrobio_navigator.crossref.documents import document_from_path, validate_upload
from astrobio_navigator.crossref.pipeline import analyze_document
from astrobio_navigator.errors import AstroBioError
from astrobio_navigator.models.analysis import AnalysisResult

console = Console()


def _print_result(result: AnalysisResult) -> None:
    console.rule("[bold cyan]Cross-reference analysis[/bold cyan]")
    console.print(f"[bold]Summary:[/bold] {result.summary}")
    console.print(f"[bold]Keywords:[/bold] {', '.join(result.keywords)}")

    related = Table(title="Related papers")
    related.add_column("#", justify="right")
    related.add_column("ID", style="cyan", no_wrap=True)
    related.add_column("Title")
    related.add_column("Score", justify="right")
    related.add_column("Matching keywords")
    for rank, paper in enumerate(result.related_papers, start=1):
        related.add_row(
            str(rank),
            paper.id,
            paper.title,
            f"{paper.relevance_score:.2f}",
            ", ".join(paper.matching_keywords),
        )
    console.print(related)

    if result.citations:
        citations = Table(title="Citations")
        citations.add_column("Paper")
        citations.add_column("Quote")
        citations.add_column("Line", justify="right")
        for c in result.citations:
            citations.add_row(c.paper_title, c.citation_text, c.line_number or "")
        console.print(citations)

    if result.cross_references:
        refs = Table(title="Cross-references")
        refs.add_column("Paper")
        refs.add_column("Quote")
        refs.add_column("Context")
        for r in result.cross_references:
            refs.add_row(r.paper_title, r.citation_text, r.context)
        console.print(refs)

    for status in result.candidate_statuses:
        if not status.succeeded:
            console.print(f"[yellow]Skipped {status.paper_id}:[/yellow] {status.reason}")


def analyze(
    pdf_path: Path = typer.Argument(..., help="PDF file to analyze."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON."),
    catalog_file: Optional[Path] = typer.Option(
        None, "--catalog-file", help="Local catalog CSV to use instead of the configured source."
    ),
):
    """
    Extract keywords from a PDF, rank related catalog papers and pull
    citations / cross-references for the best matches.
    """
    settings = get_settings()

    try:
        document = validate_upload(
            document_from_path(pdf_path),
            max_bytes=settings.MAX_UPLOAD_BYTES,
        )
        catalog = load_snapshot(catalog_file)
        with console.status("Analyzing document..."):
            result = analyze_document(document, catalog, settings=settings)
    except AstroBioError as exc:
        console.print(f"[red]Analysis failed:[/red] {exc}")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(asdict(result), indent=2))
        return

    _print_result(result)
