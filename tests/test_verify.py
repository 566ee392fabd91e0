"""Tests for audit export and verification."""

import json
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from vrf_lottery.chain import HostLedger
from vrf_lottery.lottery import Lottery
from vrf_lottery.oracle import BeaconCoordinator
from vrf_lottery.project_constants import DEFAULT_ENTRY_FEE, ROUND_DURATION_S
from vrf_lottery.rpc import Beacon
from vrf_lottery.verify import build_audit, verify_audit


def _settle(
    host: HostLedger, operator: str, funded: Callable[[], str], n: int = 3, donation: int = 0
) -> Dict[str, Any]:
    oracle = BeaconCoordinator(host)
    lottery = Lottery(host, oracle, operator=operator)
    for _ in range(n):
        lottery.enter(funded(), DEFAULT_ENTRY_FEE)
    if donation:
        host.transfer(funded(), lottery.address, donation)
    host.time_travel(ROUND_DURATION_S)
    request_id = lottery.request_random_winner(operator)
    beacon = Beacon(round=1, randomness="11" * 32)
    oracle.fulfill_from_beacon(request_id, beacon=beacon)
    return build_audit(lottery, lottery.outcomes[-1], beacon=beacon)


def _write(tmp_path: Path, audit: Dict[str, Any]) -> str:
    p = tmp_path / "audit.json"
    p.write_text(json.dumps(audit))
    return str(p)


class TestVerifyAudit:
    def test_roundtrip(self, tmp_path: Path, host: HostLedger, operator: str, funded: Callable[[], str]) -> None:
        audit = _settle(host, operator, funded)
        result = verify_audit(_write(tmp_path, audit))
        assert result["ok"] is True
        assert result["winner"] == audit["winner"]["address"]
        assert result["payout"] == 3 * DEFAULT_ENTRY_FEE

    def test_tampered_winner(self, tmp_path: Path, host: HostLedger, operator: str, funded: Callable[[], str]) -> None:
        audit = _settle(host, operator, funded)
        others = [p for p in audit["participants"] if p != audit["winner"]["address"]]
        audit["winner"]["address"] = others[0]
        with pytest.raises(RuntimeError, match="Winner mismatch"):
            verify_audit(_write(tmp_path, audit))

    def test_tampered_beacon(self, tmp_path: Path, host: HostLedger, operator: str, funded: Callable[[], str]) -> None:
        audit = _settle(host, operator, funded)
        audit["beacon"]["randomness"] = "22" * 32
        with pytest.raises(RuntimeError, match="Random value mismatch"):
            verify_audit(_write(tmp_path, audit))

    def test_tampered_payout(self, tmp_path: Path, host: HostLedger, operator: str, funded: Callable[[], str]) -> None:
        audit = _settle(host, operator, funded)
        audit["winner"]["payout"] -= 1
        with pytest.raises(RuntimeError, match="Payout mismatch"):
            verify_audit(_write(tmp_path, audit))

    def test_payout_includes_funds_sent_directly(
        self, tmp_path: Path, host: HostLedger, operator: str, funded: Callable[[], str]
    ) -> None:
        audit = _settle(host, operator, funded, donation=5)
        assert audit["winner"]["payout"] == 3 * DEFAULT_ENTRY_FEE + 5
        result = verify_audit(_write(tmp_path, audit))
        assert result["payout"] == 3 * DEFAULT_ENTRY_FEE + 5
        assert result["fees_collected"] == 3 * DEFAULT_ENTRY_FEE

    def test_tampered_fee_total(self, tmp_path: Path, host: HostLedger, operator: str, funded: Callable[[], str]) -> None:
        audit = _settle(host, operator, funded)
        audit["metadata"]["fees_collected"] += 1
        with pytest.raises(RuntimeError, match="Fee total mismatch"):
            verify_audit(_write(tmp_path, audit))
