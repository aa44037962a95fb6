"""Interfaces the valuation core needs from the rest of the fund.

The calculator never reaches for ambient state: everything it reads or writes
goes through the collaborators bundled in a `NavContext`.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Protocol

from fundnav.nav.errors import InvalidIndex
from fundnav.nav.models import NavAuditRecord, ShareClassParams, ShareClassState


class ShareClassStore(Protocol):
    def number_of_share_classes(self) -> int: ...

    def decimals(self) -> int: ...

    def get_share_class_supply(self, share_class: int) -> int: ...

    def get_share_class_details(self, share_class: int) -> ShareClassParams: ...

    def get_share_class_nav_details(self, share_class: int) -> ShareClassState: ...


class ValuationFeed(Protocol):
    def current_portfolio_value_usd(self) -> int: ...


class BalanceConverter(Protocol):
    def fund_liquid_balance_usd(self) -> int: ...

    def shares_to_usd(self, share_class: int, shares: int) -> int: ...


class AuditSink(Protocol):
    def record(self, entry: NavAuditRecord) -> None: ...


def _epoch_now() -> int:
    return int(time.time())


@dataclass(frozen=True)
class NavContext:
    store: ShareClassStore
    feed: ValuationFeed
    converter: BalanceConverter
    audit: AuditSink
    orchestrator_id: str
    clock: Callable[[], int] = field(default=_epoch_now)


def require_share_class(store: ShareClassStore, share_class: int) -> int:
    """Reject an out-of-range class index before anything is read for it."""
    n = store.number_of_share_classes()
    if isinstance(share_class, bool) or not isinstance(share_class, int) or not (0 <= share_class < n):
        raise InvalidIndex(f"share class {share_class!r} out of range (have {n})")
    return share_class
