from __future__ import annotations

import csv
import os
from pathlib import Path

import pandas as pd

from fundnav.nav.models import AUDIT_FIELDS, NavAuditRecord


def default_audit_path() -> str:
    # Append-only log of every completed calculation, one row per class per cycle.
    return os.environ.get("FUNDNAV_AUDIT_PATH", "data/nav_audit.csv")


class MemoryAuditSink:
    def __init__(self):
        self.records: list[NavAuditRecord] = []

    def record(self, entry: NavAuditRecord) -> None:
        self.records.append(entry)


class CsvAuditSink:
    def __init__(self, path: str | None = None):
        self.path = path or default_audit_path()

    def record(self, entry: NavAuditRecord) -> None:
        append_audit_record(entry, path=self.path)


def append_audit_record(entry: NavAuditRecord, *, path: str | None = None) -> str:
    path = path or default_audit_path()
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    file_exists = Path(path).exists()
    with open(path, "a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=AUDIT_FIELDS)
        if not file_exists:
            w.writeheader()
        w.writerow(entry.as_row())
    return path


def read_audit_log(*, path: str | None = None) -> list[NavAuditRecord]:
    path = path or default_audit_path()
    if not Path(path).exists():
        return []
    with open(path, newline="") as f:
        out = [NavAuditRecord(**{k: int(row.get(k) or 0) for k in AUDIT_FIELDS}) for row in csv.DictReader(f)]
    out.sort(key=lambda r: (r.ts, r.share_class))
    return out


def audit_summary(*, path: str | None = None) -> pd.DataFrame:
    """
    Fee totals per share class from the audit log.

    Columns: cycles, admin_fee, mgmt_fee, perform_fee, perform_fee_offset,
    loss_payback, last_ts, last_nav. Empty frame when nothing is logged.
    """
    cols = ["cycles", "admin_fee", "mgmt_fee", "perform_fee", "perform_fee_offset", "loss_payback", "last_ts", "last_nav"]
    records = read_audit_log(path=path)
    if not records:
        return pd.DataFrame(columns=cols).rename_axis("share_class")

    df = pd.DataFrame([r.as_row() for r in records])
    g = df.groupby("share_class")
    out = g[["admin_fee", "mgmt_fee", "perform_fee", "perform_fee_offset", "loss_payback"]].sum()
    out.insert(0, "cycles", g.size())
    last = df.sort_values("ts", kind="mergesort").groupby("share_class").tail(1).set_index("share_class")
    out["last_ts"] = last["ts"]
    out["last_nav"] = last["net_asset_value"]
    return out[cols]
