"""Per-class NAV calculation.

One call runs one valuation cycle for one share class:

- prorate the fund's freshly observed value to the class by its share of the
  previously stored fund total
- accrue management/admin fees for the elapsed time
- on a gain, pay back the loss carryforward first, then charge the
  performance fee on what is left
- on a loss, claw back performance fee already accrued (capped at the
  accumulated management fees) and grow the loss carryforward
- derive the new NAV per share

The calculator only reads from its collaborators and writes the audit sink;
persisting the returned state is the caller's job.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from fundnav.nav import fees
from fundnav.nav import fixed_point as fp
from fundnav.nav.collaborators import NavContext, require_share_class
from fundnav.nav.errors import ArithmeticFault, UnauthorizedCaller
from fundnav.nav.models import FundSnapshot, NavAuditRecord, NavCycleResult, ShareClassState

logger = logging.getLogger(__name__)

_RECONFIGURABLE = {"store", "feed", "converter", "audit", "orchestrator_id", "clock"}


class NavCalculator:
    def __init__(self, context: NavContext, *, owner_id: str | None = None):
        self.context = context
        # Identity allowed to rewire collaborators; defaults to the orchestrator.
        self.owner_id = owner_id or context.orchestrator_id

    def _authorize(self, caller: str, allowed: str) -> None:
        if caller != allowed:
            raise UnauthorizedCaller(f"caller {caller!r} is not authorized")

    def reconfigure(self, *, caller: str, **changes) -> NavContext:
        """Swap one or more collaborators; only the owner may do this."""
        self._authorize(caller, self.owner_id)
        unknown = set(changes) - _RECONFIGURABLE
        if unknown:
            raise ValueError(f"unknown context fields: {sorted(unknown)}")
        self.context = replace(self.context, **changes)
        logger.info("nav context reconfigured: %s", ", ".join(sorted(changes)))
        return self.context

    def calculate_share_class_nav(
        self,
        share_class: int,
        old_fund_total_value: int,
        *,
        caller: str,
        now: int | None = None,
    ) -> ShareClassState:
        return self.calculate(share_class, old_fund_total_value, caller=caller, now=now).state

    def calculate(
        self,
        share_class: int,
        old_fund_total_value: int,
        *,
        caller: str,
        now: int | None = None,
    ) -> NavCycleResult:
        ctx = self.context
        self._authorize(caller, ctx.orchestrator_id)
        require_share_class(ctx.store, share_class)
        old_total = fp.to_uint(old_fund_total_value)
        if old_total == 0:
            raise ArithmeticFault("old fund total value must be positive")

        scale = 10 ** ctx.store.decimals()
        params = ctx.store.get_share_class_details(share_class)
        state = ctx.store.get_share_class_nav_details(share_class)
        supply = params.share_supply
        mgmt_acc = state.accumulated_mgmt_fees
        admin_acc = state.accumulated_admin_fees
        carryforward = state.loss_carryforward

        net_asset_value = fp.mul_div(supply, state.nav_per_share, scale)
        now = ctx.clock() if now is None else now
        elapsed = fp.sub(now, state.last_calc_date)

        stored_value = fp.add(fp.add(net_asset_value, mgmt_acc), admin_acc)
        snapshot = FundSnapshot(
            portfolio_value_usd=fp.to_uint(ctx.feed.current_portfolio_value_usd()),
            liquid_balance_usd=fp.to_uint(ctx.converter.fund_liquid_balance_usd()),
        )
        prorated_gross = fp.mul_div(snapshot.total, stored_value, old_total)
        gross_less_fees = fp.sub(fp.sub(prorated_gross, mgmt_acc), admin_acc)

        supply_usd = fp.to_uint(ctx.converter.shares_to_usd(share_class, supply))
        mgmt_fee = fees.annual_fee(supply_usd, elapsed, params.mgmt_fee_bps)
        admin_fee = fees.annual_fee(supply_usd, elapsed, params.admin_fee_bps)

        gain_loss = fp.SignedAmount.difference(gross_less_fees, net_asset_value).minus(mgmt_fee).minus(admin_fee)

        perform_fee = 0
        perform_fee_offset = 0
        loss_payback = 0
        if gain_loss.is_gain:
            gain = gain_loss.to_unsigned()
            loss_payback = min(gain, carryforward)
            carryforward = fp.sub(carryforward, loss_payback)
            if params.perform_fee_bps > 0:
                perform_fee = fees.perform_fee(params.perform_fee_bps, fp.sub(gain, loss_payback), scale)
            net_asset_value = fp.sub(fp.add(net_asset_value, gain), perform_fee)
        else:
            loss = gain_loss.magnitude()
            carryforward = fp.add(carryforward, loss)
            if params.perform_fee_bps > 0:
                # Cannot refund more performance fee than has accrued.
                perform_fee_offset = min(fees.perform_fee(params.perform_fee_bps, loss, scale), mgmt_acc)
                carryforward = fp.sub(
                    carryforward,
                    fees.gain_given_perform_fee(perform_fee_offset, params.perform_fee_bps, scale),
                )
            net_asset_value = fp.sub(net_asset_value, fp.sub(loss, perform_fee_offset))

        admin_acc = fp.add(admin_acc, admin_fee)
        mgmt_acc = fp.sub(fp.add(mgmt_acc, perform_fee), perform_fee_offset)
        nav_per_share = fees.to_nav_per_share(net_asset_value, supply, scale)

        new_state = ShareClassState(
            last_calc_date=now,
            nav_per_share=nav_per_share,
            loss_carryforward=carryforward,
            accumulated_mgmt_fees=mgmt_acc,
            accumulated_admin_fees=admin_acc,
        )
        audit = NavAuditRecord(
            share_class=share_class,
            ts=now,
            elapsed=elapsed,
            gross_less_fees=gross_less_fees,
            net_asset_value=net_asset_value,
            share_supply=supply,
            admin_fee=admin_fee,
            mgmt_fee=mgmt_fee,
            perform_fee=perform_fee,
            perform_fee_offset=perform_fee_offset,
            loss_payback=loss_payback,
        )
        ctx.audit.record(audit)
        logger.debug(
            "class %d: gain_loss=%d nav=%d nav_per_share=%d perform_fee=%d offset=%d",
            share_class,
            gain_loss.value,
            net_asset_value,
            nav_per_share,
            perform_fee,
            perform_fee_offset,
        )
        return NavCycleResult(share_class=share_class, state=new_state, audit=audit)
