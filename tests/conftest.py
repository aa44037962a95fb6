"""
Pytest configuration and shared fixtures for fundnav tests.

Usage:
    @pytest.fixture functions are automatically available to all tests.
    Import helpers from conftest when needed.
"""
import sys
from pathlib import Path

import pytest

# Flat layout: make `fundnav` importable without an editable install.
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fundnav.nav.audit import MemoryAuditSink
from fundnav.nav.calculator import NavCalculator
from fundnav.nav.collaborators import NavContext
from fundnav.nav.feeds import StaticValuationFeed, StoreBalanceConverter
from fundnav.nav.store import InMemoryShareClassStore


ORCHESTRATOR = "orchestrator"
YEAR = 31_536_000
T0 = 1_700_000_000


# =============================================================================
# Test Data Helpers
# =============================================================================

def make_store(*classes: dict, decimals: int = 4) -> InMemoryShareClassStore:
    """
    Build an in-memory store; each dict may set any ShareClassParams/State field.

    Usage:
        store = make_store(dict(share_supply=1_000_000, nav_per_share=10_000, mgmt_fee_bps=200))
    """
    from fundnav.nav.models import ShareClassState

    store = InMemoryShareClassStore(decimals=decimals)
    for c in classes:
        idx = store.init_share_class(
            admin_fee_bps=c.get("admin_fee_bps", 0),
            mgmt_fee_bps=c.get("mgmt_fee_bps", 0),
            perform_fee_bps=c.get("perform_fee_bps", 0),
            share_supply=c.get("share_supply", 1_000_000),
            nav_per_share=c.get("nav_per_share", 10_000),
            last_calc_date=c.get("last_calc_date", T0),
        )
        store.save_state(
            idx,
            ShareClassState(
                last_calc_date=c.get("last_calc_date", T0),
                nav_per_share=c.get("nav_per_share", 10_000),
                loss_carryforward=c.get("loss_carryforward", 0),
                accumulated_mgmt_fees=c.get("accumulated_mgmt_fees", 0),
                accumulated_admin_fees=c.get("accumulated_admin_fees", 0),
            ),
        )
    return store


def make_calculator(
    store,
    *,
    portfolio_value: int,
    liquid: int = 0,
    audit=None,
    now: int = T0,
) -> NavCalculator:
    ctx = NavContext(
        store=store,
        feed=StaticValuationFeed(portfolio_value),
        converter=StoreBalanceConverter(store, liquid),
        audit=audit if audit is not None else MemoryAuditSink(),
        orchestrator_id=ORCHESTRATOR,
        clock=lambda: now,
    )
    return NavCalculator(ctx)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def audit_sink() -> MemoryAuditSink:
    return MemoryAuditSink()


@pytest.fixture
def nav_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Point every FUNDNAV_* path at tmp_path for CLI tests."""
    paths = {
        "FUNDNAV_STATE_PATH": str(tmp_path / "share_classes.csv"),
        "FUNDNAV_AUDIT_PATH": str(tmp_path / "nav_audit.csv"),
        "FUNDNAV_VALUATION_PATH": str(tmp_path / "valuations.csv"),
    }
    for k, v in paths.items():
        monkeypatch.setenv(k, v)
    monkeypatch.delenv("FUNDNAV_PORTFOLIO_VALUE_USD", raising=False)
    monkeypatch.setenv("FUNDNAV_ORCHESTRATOR_ID", ORCHESTRATOR)
    monkeypatch.setenv("FUNDNAV_DECIMALS", "4")
    return paths
