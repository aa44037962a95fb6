from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fundnav.cli_commands.common import fmt_units, nav_errors


def register(class_app: typer.Typer) -> None:
    @class_app.command("init")
    def class_init(
        supply: int = typer.Option(..., "--supply", help="Share supply (units)."),
        nav_per_share: int = typer.Option(..., "--nav-per-share", help="Initial NAV per share, fixed-point (e.g. 10000 = 1.0000)."),
        mgmt_bps: int = typer.Option(0, "--mgmt-bps", help="Annual management fee, basis points."),
        admin_bps: int = typer.Option(0, "--admin-bps", help="Annual administrative fee, basis points."),
        perform_bps: int = typer.Option(0, "--perform-bps", help="Performance fee, basis points."),
        ts: str = typer.Option("", "--ts", help="Start of fee accrual: ISO timestamp or epoch seconds (defaults to now)."),
        state_path: str = typer.Option("", "--state-path", help="Override FUNDNAV_STATE_PATH (CSV)."),
    ):
        """Create a share class with zero accrued fees and no loss carryforward."""
        import time

        from fundnav.config import load_settings
        from fundnav.nav.wiring import make_store
        from fundnav.utils.dates import to_epoch_seconds

        with nav_errors("Share class init"):
            store = make_store(load_settings(), state_path=state_path or None)
            idx = store.init_share_class(
                admin_fee_bps=admin_bps,
                mgmt_fee_bps=mgmt_bps,
                perform_fee_bps=perform_bps,
                share_supply=supply,
                nav_per_share=nav_per_share,
                last_calc_date=to_epoch_seconds(ts) if ts else int(time.time()),
            )
        Console().print(Panel(f"Created share class {idx}\nstate: {store.path}", title="Share class init", expand=False))

    @class_app.command("list")
    def class_list(
        state_path: str = typer.Option("", "--state-path", help="Override FUNDNAV_STATE_PATH (CSV)."),
    ):
        """Show fee schedule, state and stored value of every share class."""
        from fundnav.config import load_settings
        from fundnav.nav.aggregator import ValuationAggregator
        from fundnav.nav.wiring import make_store
        from fundnav.utils.dates import epoch_to_iso

        with nav_errors("Share classes"):
            store = make_store(load_settings(), state_path=state_path or None)
            agg = ValuationAggregator(store)
            n = store.number_of_share_classes()
            c = Console()
            if n == 0:
                c.print(Panel("No share classes yet. Use `fundnav class init ...`", title="Share classes", expand=False))
                raise typer.Exit(code=0)

            d = store.decimals()
            tbl = Table(title=f"Share classes ({store.path})")
            for col in ("class", "mgmt/admin/perf bps", "supply", "nav/share", "carryforward", "mgmt fees", "admin fees", "stored value", "last calc"):
                tbl.add_column(col, justify="left" if col in ("class", "last calc") else "right")
            for i in range(n):
                p = store.get_share_class_details(i)
                s = store.get_share_class_nav_details(i)
                tbl.add_row(
                    str(i),
                    f"{p.mgmt_fee_bps}/{p.admin_fee_bps}/{p.perform_fee_bps}",
                    f"{p.share_supply:,}",
                    fmt_units(s.nav_per_share, d),
                    f"{s.loss_carryforward:,}",
                    f"{s.accumulated_mgmt_fees:,}",
                    f"{s.accumulated_admin_fees:,}",
                    f"{agg.calc_current_share_class_value(i):,}",
                    epoch_to_iso(s.last_calc_date)[:19],
                )
            c.print(tbl)

    @class_app.command("value")
    def class_value(
        share_class: int = typer.Argument(..., help="Share class index (0-based)."),
        state_path: str = typer.Option("", "--state-path", help="Override FUNDNAV_STATE_PATH (CSV)."),
    ):
        """Stored value of one class: NAV plus unpaid fees (no fee accrual)."""
        from fundnav.config import load_settings
        from fundnav.nav.aggregator import ValuationAggregator
        from fundnav.nav.wiring import make_store

        with nav_errors("Share class value"):
            store = make_store(load_settings(), state_path=state_path or None)
            v = ValuationAggregator(store).calc_current_share_class_value(share_class)
        Console().print(Panel(f"class {share_class} stored_value={v:,}", title="Share class value", expand=False))
