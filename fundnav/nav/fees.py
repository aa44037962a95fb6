from __future__ import annotations

from fundnav.nav import fixed_point as fp
from fundnav.nav.errors import ArithmeticFault

BPS_DENOMINATOR = 10_000
# 365-day year; leap days are not modelled.
SECONDS_PER_YEAR = 31_536_000


def annual_fee(supply_usd_value: int, elapsed_seconds: int, fee_bps: int) -> int:
    """
    Fee accrued on `supply_usd_value` over `elapsed_seconds` at an annual rate of `fee_bps`.

    fee_bps * value / 10000 * elapsed / SECONDS_PER_YEAR, evaluated left to right
    so each intermediate truncates exactly once.
    """
    x = fp.mul_div(fee_bps, supply_usd_value, BPS_DENOMINATOR)
    return fp.mul_div(x, elapsed_seconds, SECONDS_PER_YEAR)


def perform_fee(fee_bps: int, usd_gain: int, scale: int) -> int:
    return fp.mul_div(fee_bps, usd_gain, scale)


def gain_given_perform_fee(fee: int, fee_bps: int, scale: int) -> int:
    """
    Inverse of perform_fee: the gain that would have produced `fee`.

    Integer truncation means perform_fee(bps, gain_given_perform_fee(fee, bps)) may
    differ from `fee` by up to one unit of scale.
    """
    return fp.mul_div(fee, scale, fee_bps)


def to_nav_per_share(nav: int, supply: int, scale: int) -> int:
    if supply == 0:
        raise ArithmeticFault("nav per share is undefined for zero share supply")
    return fp.mul_div(nav, scale, supply)
