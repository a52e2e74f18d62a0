"""Command-line interface for budgetnorm."""

import typer

from budgetnorm.cli.aggregate import aggregate, datasets

app = typer.Typer(help="Normalize and aggregate public budget line items")
app.command("aggregate")(aggregate)
app.command("datasets")(datasets)

__all__ = ["app"]
