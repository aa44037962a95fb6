from __future__ import annotations

import csv
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from fundnav.nav.collaborators import require_share_class
from fundnav.nav.models import ShareClassParams, ShareClassState

logger = logging.getLogger(__name__)


def default_state_path() -> str:
    # One row per share class: fee schedule, supply and valuation state.
    return os.environ.get("FUNDNAV_STATE_PATH", "data/share_classes.csv")


@dataclass(frozen=True)
class ShareClassRecord:
    params: ShareClassParams
    state: ShareClassState


_FIELDS = [
    "share_class",
    "admin_fee_bps",
    "mgmt_fee_bps",
    "perform_fee_bps",
    "share_supply",
    "last_calc_date",
    "nav_per_share",
    "loss_carryforward",
    "accumulated_mgmt_fees",
    "accumulated_admin_fees",
]


class InMemoryShareClassStore:
    """Share class store held in a list; index == position."""

    def __init__(self, decimals: int = 4, records: list[ShareClassRecord] | None = None):
        if decimals < 0:
            raise ValueError("decimals must be non-negative")
        self._decimals = int(decimals)
        self._records: list[ShareClassRecord] = list(records or [])

    def number_of_share_classes(self) -> int:
        return len(self._records)

    def decimals(self) -> int:
        return self._decimals

    def get_share_class_supply(self, share_class: int) -> int:
        return self.get_share_class_details(share_class).share_supply

    def get_share_class_details(self, share_class: int) -> ShareClassParams:
        require_share_class(self, share_class)
        return self._records[share_class].params

    def get_share_class_nav_details(self, share_class: int) -> ShareClassState:
        require_share_class(self, share_class)
        return self._records[share_class].state

    def init_share_class(
        self,
        *,
        admin_fee_bps: int,
        mgmt_fee_bps: int,
        perform_fee_bps: int,
        share_supply: int,
        nav_per_share: int,
        last_calc_date: int,
    ) -> int:
        """Add a share class with zero fees and carryforward; returns its index."""
        for name, v in (
            ("admin_fee_bps", admin_fee_bps),
            ("mgmt_fee_bps", mgmt_fee_bps),
            ("perform_fee_bps", perform_fee_bps),
            ("share_supply", share_supply),
            ("nav_per_share", nav_per_share),
        ):
            if int(v) < 0:
                raise ValueError(f"{name} must be non-negative")
        params = ShareClassParams(
            admin_fee_bps=int(admin_fee_bps),
            mgmt_fee_bps=int(mgmt_fee_bps),
            perform_fee_bps=int(perform_fee_bps),
            share_supply=int(share_supply),
        )
        state = ShareClassState(last_calc_date=int(last_calc_date), nav_per_share=int(nav_per_share))
        self._records.append(ShareClassRecord(params=params, state=state))
        self._flush()
        return len(self._records) - 1

    def set_share_supply(self, share_class: int, share_supply: int) -> None:
        require_share_class(self, share_class)
        if share_supply < 0:
            raise ValueError("share_supply must be non-negative")
        rec = self._records[share_class]
        params = ShareClassParams(
            admin_fee_bps=rec.params.admin_fee_bps,
            mgmt_fee_bps=rec.params.mgmt_fee_bps,
            perform_fee_bps=rec.params.perform_fee_bps,
            share_supply=int(share_supply),
        )
        self._records[share_class] = ShareClassRecord(params=params, state=rec.state)
        self._flush()

    def save_state(self, share_class: int, state: ShareClassState) -> None:
        self.save_states({share_class: state})

    def save_states(self, states: Mapping[int, ShareClassState]) -> None:
        """Replace the state of several classes in one write."""
        for i in states:
            require_share_class(self, i)
        records = list(self._records)
        for i, state in states.items():
            records[i] = ShareClassRecord(params=records[i].params, state=state)
        self._records = records
        self._flush()

    def _flush(self) -> None:
        pass


class CsvShareClassStore(InMemoryShareClassStore):
    """
    Share class store persisted to a CSV sheet.

    The whole sheet is rewritten through a temp file and `os.replace`, so a
    reader sees either the previous sheet or the new one.
    """

    def __init__(self, decimals: int = 4, path: str | None = None):
        self.path = path or default_state_path()
        super().__init__(decimals=decimals, records=read_share_classes(path=self.path))

    def _flush(self) -> None:
        write_share_classes(self._records, path=self.path)


def read_share_classes(*, path: str | None = None) -> list[ShareClassRecord]:
    path = path or default_state_path()
    if not Path(path).exists():
        return []
    with open(path, newline="") as f:
        r = csv.DictReader(f)
        rows = sorted(r, key=lambda row: int(row["share_class"]))
    out: list[ShareClassRecord] = []
    for expected, row in enumerate(rows):
        if int(row["share_class"]) != expected:
            raise ValueError(f"{path}: share class indices must be contiguous from 0 (missing {expected})")

        def _i(k: str) -> int:
            return int(row.get(k) or 0)

        out.append(
            ShareClassRecord(
                params=ShareClassParams(
                    admin_fee_bps=_i("admin_fee_bps"),
                    mgmt_fee_bps=_i("mgmt_fee_bps"),
                    perform_fee_bps=_i("perform_fee_bps"),
                    share_supply=_i("share_supply"),
                ),
                state=ShareClassState(
                    last_calc_date=_i("last_calc_date"),
                    nav_per_share=_i("nav_per_share"),
                    loss_carryforward=_i("loss_carryforward"),
                    accumulated_mgmt_fees=_i("accumulated_mgmt_fees"),
                    accumulated_admin_fees=_i("accumulated_admin_fees"),
                ),
            )
        )
    return out


def write_share_classes(records: list[ShareClassRecord], *, path: str | None = None) -> str:
    path = path or default_state_path()
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".share_classes.", suffix=".csv", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=_FIELDS)
            w.writeheader()
            for i, rec in enumerate(records):
                w.writerow(
                    {
                        "share_class": i,
                        "admin_fee_bps": rec.params.admin_fee_bps,
                        "mgmt_fee_bps": rec.params.mgmt_fee_bps,
                        "perform_fee_bps": rec.params.perform_fee_bps,
                        "share_supply": rec.params.share_supply,
                        "last_calc_date": rec.state.last_calc_date,
                        "nav_per_share": rec.state.nav_per_share,
                        "loss_carryforward": rec.state.loss_carryforward,
                        "accumulated_mgmt_fees": rec.state.accumulated_mgmt_fees,
                        "accumulated_admin_fees": rec.state.accumulated_admin_fees,
                    }
                )
        os.replace(tmp, target)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
    logger.debug("wrote %d share class(es) to %s", len(records), path)
    return path
