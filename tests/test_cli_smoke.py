"""
CLI smoke tests - verify commands are wired up and drive the file-backed store.
"""
from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from conftest import ORCHESTRATOR
from fundnav.nav.audit import read_audit_log
from fundnav.nav.store import read_share_classes

runner = CliRunner()


class TestCLIStructure:
    """Test that CLI commands are properly registered and accessible."""

    def test_cli_imports_without_error(self):
        from fundnav.cli import app
        assert app is not None

    def test_main_help(self):
        from fundnav.cli import app
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Fund NAV CLI" in result.output

    def test_class_help(self):
        from fundnav.cli import app
        result = runner.invoke(app, ["class", "--help"])
        assert result.exit_code == 0
        assert "init" in result.output


def _init_class(app, **opts):
    args = ["class", "init", "--ts", "2025-01-01T00:00:00+00:00"]
    for k, v in opts.items():
        args += [f"--{k.replace('_', '-')}", str(v)]
    return runner.invoke(app, args)


def test_init_then_cycle_updates_state_and_audit(nav_env):
    from fundnav.cli import app

    r = _init_class(app, supply=1_000_000, nav_per_share=10_000, mgmt_bps=200, admin_bps=50, perform_bps=2000)
    assert r.exit_code == 0, r.output

    r = runner.invoke(app, ["valuation", "add", "1100000", "--ts", "2026-01-01T00:00:00+00:00"])
    assert r.exit_code == 0, r.output

    r = runner.invoke(app, ["cycle", "--caller", ORCHESTRATOR, "--ts", "2026-01-01T00:00:00+00:00"])
    assert r.exit_code == 0, r.output

    [rec] = read_share_classes(path=nav_env["FUNDNAV_STATE_PATH"])
    assert rec.state.nav_per_share == 10_600
    assert rec.state.accumulated_mgmt_fees == 15_000
    assert rec.state.accumulated_admin_fees == 5_000
    [entry] = read_audit_log(path=nav_env["FUNDNAV_AUDIT_PATH"])
    assert entry.perform_fee == 15_000

    for cmd in (["total"], ["class", "list"], ["class", "value", "0"], ["audit"], ["valuation", "latest"]):
        r = runner.invoke(app, cmd)
        assert r.exit_code == 0, (cmd, r.output)


def test_calc_single_class_with_value_override(nav_env):
    from fundnav.cli import app

    assert _init_class(app, supply=1_000, nav_per_share=10_000).exit_code == 0
    r = runner.invoke(app, ["calc", "0", "--caller", ORCHESTRATOR, "--value", "1500", "--ts", "2025-01-02"])
    assert r.exit_code == 0, r.output

    [rec] = read_share_classes(path=nav_env["FUNDNAV_STATE_PATH"])
    assert rec.state.nav_per_share == 15_000


def test_unauthorized_caller_exits_nonzero_without_writing(nav_env):
    from fundnav.cli import app

    assert _init_class(app, supply=1_000, nav_per_share=10_000).exit_code == 0
    before = read_share_classes(path=nav_env["FUNDNAV_STATE_PATH"])

    r = runner.invoke(app, ["calc", "0", "--caller", "mallory", "--value", "1500"])
    assert r.exit_code == 1
    assert read_share_classes(path=nav_env["FUNDNAV_STATE_PATH"]) == before
    assert read_audit_log(path=nav_env["FUNDNAV_AUDIT_PATH"]) == []


def test_invalid_class_index_exits_nonzero(nav_env):
    from fundnav.cli import app

    r = runner.invoke(app, ["class", "value", "3"])
    assert r.exit_code == 1


def test_calc_without_old_total_refused_for_multi_class_fund(nav_env):
    from fundnav.cli import app

    for _ in range(2):
        assert _init_class(app, supply=1_000_000, nav_per_share=10_000).exit_code == 0
    before = read_share_classes(path=nav_env["FUNDNAV_STATE_PATH"])

    r = runner.invoke(app, ["calc", "0", "--caller", ORCHESTRATOR, "--value", "2200000", "--ts", "2025-01-02"])
    assert r.exit_code == 1
    assert read_share_classes(path=nav_env["FUNDNAV_STATE_PATH"]) == before


def test_calc_classes_one_after_another_share_prior_total(nav_env):
    from fundnav.cli import app
    from fundnav.nav.aggregator import ValuationAggregator
    from fundnav.nav.store import CsvShareClassStore

    for _ in range(2):
        assert _init_class(app, supply=1_000_000, nav_per_share=10_000).exit_code == 0

    for share_class in ("0", "1"):
        r = runner.invoke(
            app,
            ["calc", share_class, "--caller", ORCHESTRATOR, "--value", "2200000",
             "--old-total", "2000000", "--ts", "2025-01-02"],
        )
        assert r.exit_code == 0, r.output

    recs = read_share_classes(path=nav_env["FUNDNAV_STATE_PATH"])
    assert [rec.state.nav_per_share for rec in recs] == [11_000, 11_000]
    store = CsvShareClassStore(path=nav_env["FUNDNAV_STATE_PATH"])
    assert ValuationAggregator(store).calc_stored_total_fund_value() == 2_200_000


def test_calc_does_not_audit_when_save_fails(nav_env, monkeypatch):
    from fundnav.cli import app

    assert _init_class(app, supply=1_000, nav_per_share=10_000).exit_code == 0

    def _fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("fundnav.nav.store.write_share_classes", _fail)
    r = runner.invoke(app, ["calc", "0", "--caller", ORCHESTRATOR, "--value", "1500", "--ts", "2025-01-02"])
    assert r.exit_code != 0
    assert read_audit_log(path=nav_env["FUNDNAV_AUDIT_PATH"]) == []


def test_valuation_add_accepts_epoch_ts(nav_env):
    from fundnav.cli import app

    r = runner.invoke(app, ["valuation", "add", "1000", "--ts", "1767225600"])
    assert r.exit_code == 0, r.output
    r = runner.invoke(app, ["valuation", "latest"])
    assert r.exit_code == 0, r.output
    assert "1000" in r.output


def test_valuation_add_rejects_bad_ts(nav_env):
    from fundnav.cli import app

    r = runner.invoke(app, ["valuation", "add", "1000", "--ts", "next tuesday"])
    assert r.exit_code == 1
    assert not Path(nav_env["FUNDNAV_VALUATION_PATH"]).exists()
