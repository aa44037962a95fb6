from __future__ import annotations

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fundnav.cli_commands.common import fmt_units, nav_errors


def _override_int(x: int) -> int | None:
    return None if x < 0 else int(x)


def register(app: typer.Typer) -> None:
    @app.command("calc")
    def calc_cmd(
        share_class: int = typer.Argument(..., help="Share class index (0-based)."),
        caller: str = typer.Option(..., "--caller", help="Identity of the calling orchestrator."),
        old_total: int = typer.Option(
            -1,
            "--old-total",
            help="Stored fund total from before this cycle. Required when the fund has more than one class.",
        ),
        value: int = typer.Option(-1, "--value", help="Portfolio value in USD units (overrides the valuation sheet)."),
        liquid: int = typer.Option(-1, "--liquid", help="Fund liquid balance in USD units (overrides FUNDNAV_LIQUID_BALANCE_USD)."),
        ts: str = typer.Option("", "--ts", help="Calculation time: ISO timestamp or epoch seconds (defaults to now)."),
        state_path: str = typer.Option("", "--state-path", help="Override FUNDNAV_STATE_PATH (CSV)."),
        audit_path: str = typer.Option("", "--audit-path", help="Override FUNDNAV_AUDIT_PATH (CSV)."),
    ):
        """Recalculate one share class and persist its new state."""
        from dataclasses import replace

        from fundnav.config import load_settings
        from fundnav.nav.aggregator import ValuationAggregator
        from fundnav.nav.audit import MemoryAuditSink
        from fundnav.nav.calculator import NavCalculator
        from fundnav.nav.wiring import make_calculator
        from fundnav.utils.dates import to_epoch_seconds

        settings = load_settings()
        with nav_errors("NAV calc"):
            calc = make_calculator(
                settings,
                state_path=state_path or None,
                audit_path=audit_path or None,
                portfolio_value_usd=_override_int(value),
                liquid_balance_usd=_override_int(liquid),
            )
            store = calc.context.store
            old = _override_int(old_total)
            if old is None:
                # Later classes would be prorated against a total that already
                # includes the earlier classes' new values.
                if store.number_of_share_classes() > 1:
                    raise ValueError(
                        "fund has several share classes: pass --old-total from before the cycle, "
                        "or use `fundnav cycle`"
                    )
                old = ValuationAggregator(store).calc_stored_total_fund_value()

            # The audit row is only written once the new state is saved.
            buffer = MemoryAuditSink()
            staged = NavCalculator(replace(calc.context, audit=buffer), owner_id=calc.owner_id)
            res = staged.calculate(share_class, old, caller=caller, now=to_epoch_seconds(ts) if ts else None)
            store.save_state(share_class, res.state)
            for entry in buffer.records:
                calc.context.audit.record(entry)

        d = store.decimals()
        a = res.audit
        Console().print(
            Panel(
                f"class {share_class}  elapsed={a.elapsed}s  supply={a.share_supply:,}\n"
                f"gross_less_fees={fmt_units(a.gross_less_fees, 0)}  nav={fmt_units(a.net_asset_value, 0)}\n"
                f"mgmt_fee={a.mgmt_fee:,} admin_fee={a.admin_fee:,} perform_fee={a.perform_fee:,} "
                f"offset={a.perform_fee_offset:,} loss_payback={a.loss_payback:,}\n"
                f"nav_per_share={fmt_units(res.state.nav_per_share, d)}  "
                f"loss_carryforward={res.state.loss_carryforward:,}\n"
                f"accumulated mgmt={res.state.accumulated_mgmt_fees:,} admin={res.state.accumulated_admin_fees:,}",
                title="NAV calc",
                expand=False,
            )
        )

    @app.command("cycle")
    def cycle_cmd(
        caller: str = typer.Option(..., "--caller", help="Identity of the calling orchestrator."),
        value: int = typer.Option(-1, "--value", help="Portfolio value in USD units (overrides the valuation sheet)."),
        liquid: int = typer.Option(-1, "--liquid", help="Fund liquid balance in USD units."),
        ts: str = typer.Option("", "--ts", help="Calculation time: ISO timestamp or epoch seconds (defaults to now)."),
        state_path: str = typer.Option("", "--state-path", help="Override FUNDNAV_STATE_PATH (CSV)."),
        audit_path: str = typer.Option("", "--audit-path", help="Override FUNDNAV_AUDIT_PATH (CSV)."),
    ):
        """Recalculate every share class against one stored fund total; commit all or nothing."""
        from fundnav.config import load_settings
        from fundnav.nav.cycle import ValuationCycle
        from fundnav.nav.wiring import make_calculator
        from fundnav.utils.dates import to_epoch_seconds

        settings = load_settings()
        with nav_errors("NAV cycle"):
            calc = make_calculator(
                settings,
                state_path=state_path or None,
                audit_path=audit_path or None,
                portfolio_value_usd=_override_int(value),
                liquid_balance_usd=_override_int(liquid),
            )
            report = ValuationCycle(calc).run(caller=caller, now=to_epoch_seconds(ts) if ts else None)

        d = calc.context.store.decimals()
        tbl = Table(title=f"Valuation cycle (stored total {report.old_fund_total_value:,} -> {report.new_fund_total_value:,})")
        tbl.add_column("class", style="bold")
        tbl.add_column("nav/share", justify="right")
        tbl.add_column("nav", justify="right")
        tbl.add_column("mgmt fee", justify="right")
        tbl.add_column("admin fee", justify="right")
        tbl.add_column("perf fee", justify="right")
        tbl.add_column("offset", justify="right")
        tbl.add_column("carryforward", justify="right")
        for r in report.results:
            tbl.add_row(
                str(r.share_class),
                fmt_units(r.state.nav_per_share, d),
                f"{r.audit.net_asset_value:,}",
                f"{r.audit.mgmt_fee:,}",
                f"{r.audit.admin_fee:,}",
                f"{r.audit.perform_fee:,}",
                f"{r.audit.perform_fee_offset:,}",
                f"{r.state.loss_carryforward:,}",
            )
        Console().print(tbl)

    @app.command("total")
    def total_cmd(
        state_path: str = typer.Option("", "--state-path", help="Override FUNDNAV_STATE_PATH (CSV)."),
    ):
        """Print the fund's stored total value (next cycle's proration denominator)."""
        from fundnav.config import load_settings
        from fundnav.nav.aggregator import ValuationAggregator
        from fundnav.nav.wiring import make_store

        with nav_errors("NAV total"):
            store = make_store(load_settings(), state_path=state_path or None)
            total = ValuationAggregator(store).calc_stored_total_fund_value()
        Console().print(
            Panel(f"classes={store.number_of_share_classes()}  stored_total={total:,}", title="Fund stored value", expand=False)
        )

    @app.command("audit")
    def audit_cmd(
        audit_path: str = typer.Option("", "--audit-path", help="Override FUNDNAV_AUDIT_PATH (CSV)."),
    ):
        """Summarize the audit log: fee totals per share class."""
        from fundnav.config import load_settings
        from fundnav.nav.audit import audit_summary

        path = audit_path or load_settings().audit_path
        df = audit_summary(path=path)
        c = Console()
        if df.empty:
            c.print(Panel(f"No calculations logged yet.\naudit: {path}", title="NAV audit", expand=False))
            raise typer.Exit(code=0)

        tbl = Table(title=f"NAV audit ({path})")
        tbl.add_column("class", style="bold")
        for col in df.columns:
            tbl.add_column(col, justify="right")
        for share_class, row in df.iterrows():
            tbl.add_row(str(share_class), *[f"{int(v):,}" for v in row.tolist()])
        c.print(tbl)
