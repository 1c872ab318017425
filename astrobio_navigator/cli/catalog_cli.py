# astrobio_navigator/cli/catalog_cli.py

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from astrobio_navigator.catalog.fields import parse_authors, process_image_urls
from astrobio_navigator.catalog.loader import load_catalog
from astrobio_navigator.catalog.snapshot import CatalogSnapshot

app = typer.Typer(help="Browse the paper catalog.")

console = Console()


def load_snapshot(catalog_file: Optional[Path]) -> CatalogSnapshot:
    """
    Load the catalog from --catalog-file if given, otherwise from settings
    (local CSV path, then remote CSV URL, then built-in fallback).
    """
    if catalog_file is not None and not Path(catalog_file).exists():
        console.print(f"[red]Catalog file not found:[/red] {catalog_file}")
        raise typer.Exit(code=1)
    return load_catalog(csv_path=catalog_file)


@app.command("search")
def search(
    query: str = typer.Argument(..., help="Text to match against title, content and id."),
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Max number of hits to display."),
    catalog_file: Optional[Path] = typer.Option(
        None, "--catalog-file", help="Local catalog CSV to use instead of the configured source."
    ),
):
    """
    Case-insensitive substring search over the catalog.
    """
    catalog = load_snapshot(catalog_file)
    hits = catalog.search(query)

    if not hits:
        console.print(f"[yellow]No papers match[/yellow] {query!r}")
        raise typer.Exit(code=0)

    table = Table(title=f"{len(hits)} paper(s) matching {query!r}")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Link", overflow="fold")
    for entry in hits[:limit]:
        table.add_row(entry.id, entry.title, entry.link)
    console.print(table)


@app.command("show")
def show(
    paper_id: str = typer.Argument(..., help="Catalog id of the paper."),
    catalog_file: Optional[Path] = typer.Option(
        None, "--catalog-file", help="Local catalog CSV to use instead of the configured source."
    ),
):
    """
    Print one paper with its authors and figure URLs.
    """
    catalog = load_snapshot(catalog_file)
    entry = catalog.get(paper_id)
    if entry is None:
        console.print(f"[red]Paper not found:[/red] {paper_id}")
        raise typer.Exit(code=1)

    console.rule(f"[bold cyan]{entry.id}[/bold cyan]")
    console.print(f"[bold]{entry.title}[/bold]")
    if entry.link:
        console.print(f"Link: {entry.link}")
    if entry.pdf_link:
        console.print(f"PDF: {entry.pdf_link}")

    authors = parse_authors(entry.authors)
    if authors:
        console.print(f"Authors: {', '.join(authors)}")

    if entry.content:
        console.print()
        console.print(entry.content)

    images = process_image_urls(entry.images)
    if images:
        console.print()
        console.print("[bold]Figures:[/bold]")
        for url in images:
            console.print(f"  {url}")
