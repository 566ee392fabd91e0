from __future__ import annotations

import argparse
import json
import logging
from typing import Optional

from .chain import HostLedger, generate_address
from .config import Settings
from .draw import to_ether
from .entrants import load_entrants
from .lottery import Lottery
from .oracle import BeaconCoordinator
from .rpc import Beacon, BeaconClient, load_beacon_from_file
from .verify import build_audit, verify_audit


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def cmd_simulate(args: argparse.Namespace) -> int:
    if args.random_value is not None and args.beacon_round is not None:
        raise SystemExit("--beacon-round only applies to beacon sources, not --random-value.")
    settings = Settings.from_env(beacon_url_override=args.beacon_url)
    log = logging.getLogger("simulate")

    entrants = load_entrants(args.entrants)
    if not entrants:
        raise SystemExit("No entrants. Check the entrants file.")
    log.info("Entrants loaded   : %d", len(entrants))

    host = HostLedger()
    operator = generate_address()
    client: Optional[BeaconClient] = None
    if args.random_value is None and not args.beacon_file:
        client = BeaconClient(settings.beacon_url, timeout_s=args.timeout)
    oracle = BeaconCoordinator(host, client=client)
    lottery = Lottery(
        host,
        oracle,
        operator=operator,
        key_hash=settings.key_hash,
        entry_fee=settings.entry_fee,
        round_duration=settings.round_duration_s,
    )

    for addr in entrants:
        if host.balance_of(addr) < settings.entry_fee:
            host.set_balance(addr, host.balance_of(addr) + settings.entry_fee)
        lottery.enter(addr, settings.entry_fee)
    log.info("Pool              : %s", to_ether(lottery.pool_balance()))

    host.time_travel(lottery.closes_at() - host.now())
    request_id = lottery.request_random_winner(operator)
    log.info("Request id        : %s", request_id)

    beacon: Optional[Beacon] = None
    try:
        if args.random_value is not None:
            oracle.fulfill(request_id, args.random_value)
        else:
            if args.beacon_file:
                beacon = load_beacon_from_file(args.beacon_file, round_hint=args.beacon_round)
            oracle.fulfill_from_beacon(request_id, beacon=beacon, round_no=args.beacon_round)
            beacon = oracle.beacons[request_id]
    finally:
        if client is not None:
            client.close()

    outcome = lottery.outcomes[-1]
    audit = build_audit(lottery, outcome, beacon=beacon)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump(audit, f, indent=2)

    print("========================================")
    print("🎟  VRF LOTTERY DRAW")
    print("========================================")
    print(f"Round         : {outcome.round_id}")
    print(f"Tickets       : {len(outcome.participants)}")
    print(f"Request id    : {outcome.request_id}")
    if beacon is not None:
        print(f"Beacon round  : {beacon.round}")
    print("----------------------------------------")
    print("🏆 WINNER")
    print(f"Address       : {outcome.winner}")
    print(f"Ticket index  : {outcome.winner_index}")
    print(f"Payout        : {to_ether(outcome.payout)}")
    print("----------------------------------------")
    print(f"🧾 Wrote audit: {args.out}")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    result = verify_audit(args.audit)
    print("✅ AUDIT VERIFIED")
    print(f"Winner        : {result['winner']}")
    print(f"Ticket index  : {result['winner_index']}")
    print(f"Tickets       : {result['participants']}")
    print(f"Payout        : {to_ether(result['payout'])}")
    return 0


def cmd_beacon(args: argparse.Namespace) -> int:
    settings = Settings.from_env(beacon_url_override=args.beacon_url)
    client = BeaconClient(settings.beacon_url, timeout_s=args.timeout)
    try:
        beacon = client.get_round(args.round) if args.round else client.get_latest()
    finally:
        client.close()

    print("--- BEACON ---")
    print(f"Source        : {settings.beacon_url}")
    print(f"Round         : {beacon.round}")
    print(f"Randomness    : {beacon.randomness}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vrf-lottery",
        description="Fee-entry lottery settled by an asynchronous randomness oracle.",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument("--beacon-url", default=None, help="Override beacon URL (else use env).")
    p.add_argument("--timeout", type=float, default=60.0, help="Beacon HTTP timeout seconds.")

    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("simulate", help="Run one full round and write an audit JSON.")
    s.add_argument("--entrants", required=True, help="File with one address per line.")
    src = s.add_mutually_exclusive_group()
    src.add_argument("--random-value", type=int, default=None, help="Deliver this value instead of a beacon.")
    src.add_argument("--beacon-file", default=None, help="Read the beacon from a file.")
    s.add_argument("--beacon-round", type=int, default=None, help="Beacon round for a fetched or file beacon (else latest).")
    s.add_argument("--out", default="audit.json", help="Audit output JSON path.")
    s.set_defaults(func=cmd_simulate)

    v = sub.add_parser(
        "verify", help="Verify an existing audit.json deterministically."
    )
    v.add_argument("--audit", required=True, help="Path to audit.json.")
    v.set_defaults(func=cmd_verify)

    b = sub.add_parser("beacon", help="Print a randomness beacon.")
    b.add_argument("--round", type=int, default=None, help="Beacon round (else latest).")
    b.set_defaults(func=cmd_beacon)

    return p


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    setup_logging(args.verbose)
    raise SystemExit(args.func(args))
