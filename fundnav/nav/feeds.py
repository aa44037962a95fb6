"""Simple valuation feeds and balance converters.

Production deployments plug in their own implementations of the
`ValuationFeed` / `BalanceConverter` protocols; these cover static values,
a CSV price sheet, and the store-backed share valuation.
"""
from __future__ import annotations

import csv
import os
from pathlib import Path

from fundnav.nav import fixed_point as fp
from fundnav.nav.collaborators import ShareClassStore
from fundnav.utils.dates import epoch_to_iso, parse_timestamp, to_epoch_seconds


def default_valuation_path() -> str:
    return os.environ.get("FUNDNAV_VALUATION_PATH", "data/valuations.csv")


class StaticValuationFeed:
    def __init__(self, portfolio_value_usd: int):
        self.portfolio_value_usd = fp.to_uint(portfolio_value_usd)

    def current_portfolio_value_usd(self) -> int:
        return self.portfolio_value_usd


class CsvValuationFeed:
    """Latest `value` from a `ts,value` CSV (integer USD units)."""

    def __init__(self, path: str | None = None):
        self.path = path or default_valuation_path()

    def current_portfolio_value_usd(self) -> int:
        if not Path(self.path).exists():
            raise FileNotFoundError(self.path)
        with open(self.path, newline="") as f:
            rows = [row for row in csv.DictReader(f) if (row.get("value") or "").strip()]
        if not rows:
            raise ValueError(f"{self.path}: no valuations recorded")
        # Equal timestamps resolve to the row appended last.
        latest = max(
            enumerate(rows),
            key=lambda item: (parse_timestamp(str(item[1].get("ts") or "")), item[0]),
        )[1]
        return fp.to_uint(int(str(latest["value"]).strip()))


def append_valuation(*, ts: str | int, value: int, path: str | None = None) -> str:
    """Append one valuation; `ts` may be ISO or epoch seconds and is stored as ISO UTC."""
    value = fp.to_uint(int(value))
    ts = epoch_to_iso(to_epoch_seconds(ts))
    path = path or default_valuation_path()
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    file_exists = Path(path).exists()
    with open(path, "a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=["ts", "value"])
        if not file_exists:
            w.writeheader()
        w.writerow({"ts": ts, "value": str(value)})
    return path


class StoreBalanceConverter:
    """
    Converts with the store's own numbers: shares are valued at the class's
    persisted NAV per share, and the fund's liquid balance is a fixed USD amount.
    """

    def __init__(self, store: ShareClassStore, liquid_balance_usd: int = 0):
        self.store = store
        self.liquid_balance_usd = fp.to_uint(liquid_balance_usd)

    def fund_liquid_balance_usd(self) -> int:
        return self.liquid_balance_usd

    def shares_to_usd(self, share_class: int, shares: int) -> int:
        state = self.store.get_share_class_nav_details(share_class)
        return fp.mul_div(shares, state.nav_per_share, 10 ** self.store.decimals())
