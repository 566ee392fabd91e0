from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .draw import derive_random_value, pick_winner
from .lottery import Lottery, Outcome
from .rpc import Beacon


def build_audit(lottery: Lottery, outcome: Outcome, beacon: Optional[Beacon] = None) -> Dict[str, Any]:
    audit: Dict[str, Any] = {
        "metadata": {
            "tool": "vrf-lottery",
            "version": "1.0.0",
            "generated_at_utc": datetime.now(timezone.utc).isoformat(),
            "contract": lottery.address,
            "operator": lottery.operator,
            "oracle": lottery.oracle.address,
            "key_hash": lottery.key_hash,
            "entry_fee": lottery.current_fee(),
            "fees_collected": lottery.current_fee() * len(outcome.participants),
            "round_id": outcome.round_id,
            "request_id": outcome.request_id,
            "random_value": str(outcome.random_value),  # big int; store as string for safety
            "settled_at": outcome.settled_at,
        },
        "winner": {
            "address": outcome.winner,
            "index": outcome.winner_index,
            "payout": outcome.payout,
        },
        # Join order is the selector; keep it exactly.
        "participants": list(outcome.participants),
    }
    if beacon is not None:
        audit["beacon"] = {
            "round": beacon.round,
            "randomness": beacon.randomness,
            "signature": beacon.signature,
        }
    return audit


def verify_audit(audit_path: str) -> Dict[str, Any]:
    with open(audit_path, "r", encoding="utf-8") as f:
        audit = json.load(f)

    meta = audit["metadata"]
    random_value = int(meta["random_value"])
    participants = [str(p) for p in audit["participants"]]

    beacon = audit.get("beacon")
    if beacon is not None:
        recomputed, _ = derive_random_value(beacon["randomness"], meta["request_id"])
        if recomputed != random_value:
            raise RuntimeError(
                f"Random value mismatch: audit={random_value} recomputed={recomputed}"
            )

    index, winner = pick_winner(participants, random_value)
    if index != int(audit["winner"]["index"]):
        raise RuntimeError(
            f"Winner index mismatch: audit={audit['winner']['index']} recomputed={index}"
        )
    if winner != audit["winner"]["address"]:
        raise RuntimeError(
            f"Winner mismatch: audit={audit['winner']['address']} recomputed={winner}"
        )

    # The pool is the contract balance, so it can exceed the fees but never fall short.
    fees = int(meta["entry_fee"]) * len(participants)
    if "fees_collected" in meta and int(meta["fees_collected"]) != fees:
        raise RuntimeError(
            f"Fee total mismatch: audit={meta['fees_collected']} recomputed={fees}"
        )
    payout = int(audit["winner"]["payout"])
    if payout < fees:
        raise RuntimeError(
            f"Payout mismatch: audit={payout} is below collected fees={fees}"
        )

    return {
        "ok": True,
        "winner": winner,
        "winner_index": index,
        "random_value": random_value,
        "participants": len(participants),
        "payout": payout,
        "fees_collected": fees,
    }
