from __future__ import annotations

import pytest

from conftest import make_store
from fundnav.nav.aggregator import ValuationAggregator
from fundnav.nav.errors import InvalidIndex


def test_class_value_includes_unpaid_fees():
    store = make_store(
        dict(share_supply=1_000_000, nav_per_share=10_600, accumulated_mgmt_fees=15_000, accumulated_admin_fees=5_000)
    )
    assert ValuationAggregator(store).calc_current_share_class_value(0) == 1_060_000 + 15_000 + 5_000


def test_total_is_sum_of_class_values():
    store = make_store(
        dict(share_supply=1_000_000, nav_per_share=10_600, accumulated_mgmt_fees=15_000),
        dict(share_supply=333_333, nav_per_share=9_999, accumulated_admin_fees=17),
        dict(share_supply=0, nav_per_share=10_000),
    )
    agg = ValuationAggregator(store)
    per_class = [agg.calc_current_share_class_value(i) for i in range(store.number_of_share_classes())]
    assert agg.calc_stored_total_fund_value() == sum(per_class)
    # 333,333 * 9,999 / 10,000 truncates
    assert per_class[1] == 333_299 + 17
    assert per_class[2] == 0


def test_empty_fund_total_is_zero():
    assert ValuationAggregator(make_store()).calc_stored_total_fund_value() == 0


def test_value_is_read_only():
    store = make_store(dict(share_supply=10, nav_per_share=10_000))
    before = store.get_share_class_nav_details(0)
    ValuationAggregator(store).calc_stored_total_fund_value()
    assert store.get_share_class_nav_details(0) == before


def test_out_of_range_class():
    with pytest.raises(InvalidIndex):
        ValuationAggregator(make_store()).calc_current_share_class_value(0)
