"""Rich console output helpers."""

import pandas as pd
from rich.console import Console
from rich.table import Table

console = Console()


def ok(msg: str):
    """Print success message."""
    console.print(f"  [green]✓[/green] {msg}")


def fail(msg: str):
    """Print failure message."""
    console.print(f"  [red]✗[/red] {msg}")


def header(msg: str):
    """Print bold header."""
    console.print(f"\n[bold]{msg}[/bold]")


def make_field_table(df: pd.DataFrame, title: str = "") -> Table:
    """Min / mean / max of every field column in a model dataframe."""
    table = Table(title=title or None, show_header=True, header_style="bold cyan", border_style="dim")
    table.add_column("Field", style="bold")
    for col in ("min", "mean", "max"):
        table.add_column(col, justify="right")

    for name in df.columns:
        if name in ("x", "y"):
            continue
        values = df[name]
        table.add_row(name, f"{values.min():.6g}", f"{values.mean():.6g}", f"{values.max():.6g}")
    return table


def print_field_table(df: pd.DataFrame, title: str = ""):
    console.print(make_field_table(df, title))
