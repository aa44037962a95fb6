from __future__ import annotations

from fundnav.config import Settings
from fundnav.nav.audit import CsvAuditSink
from fundnav.nav.calculator import NavCalculator
from fundnav.nav.collaborators import NavContext, ValuationFeed
from fundnav.nav.feeds import CsvValuationFeed, StaticValuationFeed, StoreBalanceConverter
from fundnav.nav.store import CsvShareClassStore


def make_store(settings: Settings, *, state_path: str | None = None) -> CsvShareClassStore:
    return CsvShareClassStore(decimals=settings.decimals, path=state_path or settings.state_path)


def make_feed(settings: Settings, *, portfolio_value_usd: int | None = None) -> ValuationFeed:
    value = portfolio_value_usd if portfolio_value_usd is not None else settings.portfolio_value_usd
    if value is not None:
        return StaticValuationFeed(value)
    return CsvValuationFeed(settings.valuation_path)


def make_calculator(
    settings: Settings,
    *,
    state_path: str | None = None,
    audit_path: str | None = None,
    portfolio_value_usd: int | None = None,
    liquid_balance_usd: int | None = None,
) -> NavCalculator:
    """File-backed calculator wired from settings; keyword overrides win over settings."""
    store = make_store(settings, state_path=state_path)
    balance = settings.liquid_balance_usd if liquid_balance_usd is None else liquid_balance_usd
    ctx = NavContext(
        store=store,
        feed=make_feed(settings, portfolio_value_usd=portfolio_value_usd),
        converter=StoreBalanceConverter(store, balance),
        audit=CsvAuditSink(audit_path or settings.audit_path),
        orchestrator_id=settings.orchestrator_id,
    )
    return NavCalculator(ctx)
