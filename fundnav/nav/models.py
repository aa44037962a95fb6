from __future__ import annotations

from dataclasses import asdict, dataclass

from fundnav.nav import fixed_point as fp


@dataclass(frozen=True)
class ShareClassParams:
    """Fee schedule and supply of one share class, read-only during a cycle."""

    admin_fee_bps: int
    mgmt_fee_bps: int
    perform_fee_bps: int
    share_supply: int


@dataclass(frozen=True)
class ShareClassState:
    """Per-class valuation state, rewritten once per successful cycle."""

    last_calc_date: int  # epoch seconds
    nav_per_share: int
    loss_carryforward: int = 0
    accumulated_mgmt_fees: int = 0
    accumulated_admin_fees: int = 0


@dataclass(frozen=True)
class FundSnapshot:
    portfolio_value_usd: int
    liquid_balance_usd: int = 0

    @property
    def total(self) -> int:
        return fp.add(self.portfolio_value_usd, self.liquid_balance_usd)


@dataclass(frozen=True)
class NavAuditRecord:
    share_class: int
    ts: int
    elapsed: int
    gross_less_fees: int
    net_asset_value: int
    share_supply: int
    admin_fee: int
    mgmt_fee: int
    perform_fee: int
    perform_fee_offset: int
    loss_payback: int

    def as_row(self) -> dict[str, int]:
        return asdict(self)


AUDIT_FIELDS = list(NavAuditRecord.__dataclass_fields__)


@dataclass(frozen=True)
class NavCycleResult:
    share_class: int
    state: ShareClassState
    audit: NavAuditRecord
