from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel

from fundnav.cli_commands.common import nav_errors


def register(valuation_app: typer.Typer) -> None:
    @valuation_app.command("add")
    def valuation_add(
        value: int = typer.Argument(..., help="Portfolio value in USD units (non-negative integer)."),
        ts: str = typer.Option("", "--ts", help="ISO timestamp or epoch seconds (defaults to now UTC)."),
        valuation_path: str = typer.Option("", "--valuation-path", help="Override FUNDNAV_VALUATION_PATH (CSV)."),
    ):
        """Record an externally observed portfolio valuation."""
        from fundnav.config import load_settings
        from fundnav.nav.feeds import append_valuation
        from fundnav.utils.dates import utc_now_iso

        with nav_errors("Valuation"):
            path = append_valuation(
                ts=ts or utc_now_iso(),
                value=value,
                path=valuation_path or load_settings().valuation_path,
            )
        Console().print(Panel(f"Logged valuation: {value:,}\nvaluations: {path}", title="Valuation", expand=False))

    @valuation_app.command("latest")
    def valuation_latest(
        valuation_path: str = typer.Option("", "--valuation-path", help="Override FUNDNAV_VALUATION_PATH (CSV)."),
    ):
        """Show the valuation the next calculation will use."""
        from fundnav.config import load_settings
        from fundnav.nav.feeds import CsvValuationFeed
        from fundnav.utils.logging import log_event

        path = valuation_path or load_settings().valuation_path
        with nav_errors("Valuation"):
            value = CsvValuationFeed(path).current_portfolio_value_usd()
        log_event("valuation.latest", {"path": path, "portfolio_value_usd": value})
