from __future__ import annotations

from contextlib import contextmanager

import typer
from rich.console import Console
from rich.panel import Panel

from fundnav.nav.errors import NavError


def fmt_units(x: int, decimals: int) -> str:
    """Render a fixed-point integer, e.g. 10620 with 4 decimals -> '1.0620'."""
    if decimals <= 0:
        return f"{int(x):,}"
    sign = "-" if x < 0 else ""
    whole, frac = divmod(abs(int(x)), 10**decimals)
    return f"{sign}{whole:,}.{frac:0{decimals}d}"


@contextmanager
def nav_errors(title: str):
    """Turn valuation failures into a red panel and a non-zero exit."""
    try:
        yield
    except (NavError, ValueError, FileNotFoundError) as e:
        Console(stderr=True).print(Panel(f"{type(e).__name__}: {e}", title=title, border_style="red", expand=False))
        raise typer.Exit(code=1)
