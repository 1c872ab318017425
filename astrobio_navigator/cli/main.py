# astrobio_navigator/cli/main.py

from __future__ import annotations

import logging

import typer
from astrobio_navigator.cli import analyze_cli, catalog_cli

app = typer.Typer(help="CLI tools for AstroBio Navigator.")

app.add_typer(catalog_cli.app, name="catalog")
app.command("analyze")(analyze_cli.analyze)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable INFO logging.")):
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)


if __name__ == "__main__":
    app()
