"""Share class valuation and fee allocation.

This package turns a raw portfolio valuation into per-share economics for each
share class of a fund:
- fee accrual for elapsed time (management, administrative)
- performance fees, paid back against a loss carryforward and clawed back in
  loss periods
- NAV per share in fixed-point integer arithmetic
"""
from fundnav.nav.aggregator import ValuationAggregator
from fundnav.nav.calculator import NavCalculator
from fundnav.nav.collaborators import NavContext
from fundnav.nav.errors import ArithmeticFault, InvalidIndex, NavError, UnauthorizedCaller
from fundnav.nav.models import FundSnapshot, NavAuditRecord, ShareClassParams, ShareClassState

__all__ = [
    "ArithmeticFault",
    "FundSnapshot",
    "InvalidIndex",
    "NavAuditRecord",
    "NavCalculator",
    "NavContext",
    "NavError",
    "ShareClassParams",
    "ShareClassState",
    "UnauthorizedCaller",
    "ValuationAggregator",
]
