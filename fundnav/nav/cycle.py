"""Whole-fund valuation cycle.

Every class is prorated against the same stored fund total, read once before
any class is recalculated. New states and audit records are only committed
after all classes calculated; a fault in any class leaves the store and the
audit log untouched.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Protocol

from fundnav.nav.aggregator import ValuationAggregator
from fundnav.nav.audit import MemoryAuditSink
from fundnav.nav.calculator import NavCalculator
from fundnav.nav.collaborators import ShareClassStore
from fundnav.nav.models import NavCycleResult, ShareClassState

logger = logging.getLogger(__name__)


class WritableShareClassStore(ShareClassStore, Protocol):
    def save_states(self, states: dict[int, ShareClassState]) -> None: ...


@dataclass(frozen=True)
class CycleReport:
    ts: int
    old_fund_total_value: int
    new_fund_total_value: int
    results: list[NavCycleResult]


class ValuationCycle:
    def __init__(self, calculator: NavCalculator):
        self.calculator = calculator
        self._lock = threading.Lock()

    @property
    def store(self) -> WritableShareClassStore:
        return self.calculator.context.store  # type: ignore[return-value]

    def run(
        self,
        *,
        caller: str,
        share_classes: list[int] | None = None,
        now: int | None = None,
    ) -> CycleReport:
        with self._lock:
            ctx = self.calculator.context
            store = self.store
            now = ctx.clock() if now is None else now
            classes = list(range(store.number_of_share_classes())) if share_classes is None else list(share_classes)
            if len(set(classes)) != len(classes):
                raise ValueError("each share class may be calculated at most once per cycle")
            old_total = ValuationAggregator(store).calc_stored_total_fund_value()

            # Hold audit entries back until the states are committed.
            buffer = MemoryAuditSink()
            staged = NavCalculator(replace(ctx, audit=buffer), owner_id=self.calculator.owner_id)
            results = [staged.calculate(i, old_total, caller=caller, now=now) for i in classes]

            store.save_states({r.share_class: r.state for r in results})
            for entry in buffer.records:
                ctx.audit.record(entry)

            new_total = ValuationAggregator(store).calc_stored_total_fund_value()
            logger.info(
                "valuation cycle committed: %d class(es), stored total %d -> %d",
                len(results),
                old_total,
                new_total,
            )
            return CycleReport(ts=now, old_fund_total_value=old_total, new_fund_total_value=new_total, results=results)
