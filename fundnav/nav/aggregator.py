from __future__ import annotations

from fundnav.nav import fixed_point as fp
from fundnav.nav.collaborators import ShareClassStore, require_share_class
from fundnav.nav.models import ShareClassParams, ShareClassState


def stored_class_value(params: ShareClassParams, state: ShareClassState, scale: int) -> int:
    """NAV of the class plus the fees it owes but has not paid."""
    nav = fp.mul_div(params.share_supply, state.nav_per_share, scale)
    return fp.add(fp.add(nav, state.accumulated_mgmt_fees), state.accumulated_admin_fees)


class ValuationAggregator:
    """Read-only view of the fund's stored value, per class and in total."""

    def __init__(self, store: ShareClassStore):
        self.store = store

    @property
    def scale(self) -> int:
        return 10 ** self.store.decimals()

    def calc_current_share_class_value(self, share_class: int) -> int:
        require_share_class(self.store, share_class)
        params = self.store.get_share_class_details(share_class)
        state = self.store.get_share_class_nav_details(share_class)
        return stored_class_value(params, state, self.scale)

    def calc_stored_total_fund_value(self) -> int:
        total = 0
        for i in range(self.store.number_of_share_classes()):
            total = fp.add(total, self.calc_current_share_class_value(i))
        return total
