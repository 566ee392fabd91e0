from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .errors import OracleError


@dataclass(frozen=True)
class Beacon:
    round: int
    randomness: str
    signature: str = ""


def _parse_beacon(obj: Any) -> Beacon:
    if not isinstance(obj, dict):
        raise OracleError("beacon payload is not an object")
    randomness = obj.get("randomness")
    if not isinstance(randomness, str) or not randomness:
        raise OracleError("beacon payload has no randomness")
    try:
        round_no = int(obj["round"])
    except (KeyError, TypeError, ValueError):
        raise OracleError("beacon payload has no round")
    return Beacon(round=round_no, randomness=randomness, signature=str(obj.get("signature", "")))


class BeaconClient:
    """Reads a drand-style public randomness beacon over HTTP."""

    def __init__(self, beacon_url: str, timeout_s: float = 60.0, transport: Optional[httpx.BaseTransport] = None) -> None:
        self.beacon_url = beacon_url.rstrip("/")
        self.client = httpx.Client(timeout=timeout_s, transport=transport)

    def close(self) -> None:
        self.client.close()

    def get_latest(self) -> Beacon:
        """Returns the most recent beacon."""
        return _parse_beacon(self._get("/public/latest"))

    def get_round(self, round_no: int) -> Beacon:
        """Returns the beacon for a given round."""
        if round_no <= 0:
            raise OracleError(f"invalid beacon round {round_no}")
        beacon = _parse_beacon(self._get(f"/public/{round_no}"))
        if beacon.round != round_no:
            raise OracleError(
                f"beacon round mismatch: asked={round_no} got={beacon.round}"
            )
        return beacon

    def _get(self, path: str) -> Dict[str, Any]:
        try:
            resp = self.client.get(self.beacon_url + path)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            raise OracleError(f"beacon request failed: {e}")
        except ValueError as e:
            raise OracleError(f"beacon response is not JSON: {e}")


def load_beacon_from_file(path: str, round_hint: Optional[int] = None) -> Beacon:
    """
    Supports:
    1) Raw randomness hex string in file (round taken from round_hint, else 0)
    2) JSON object containing:
       - {"round": 123, "randomness": "..."}   (optionally verified against round_hint)
       - {"beacons": {"123": {"randomness": "..."}}}  (requires round_hint)
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = f.read().strip()

    if raw and raw[0] != "{":
        return Beacon(round=round_hint or 0, randomness=raw)

    try:
        j = json.loads(raw)
    except ValueError as e:
        raise OracleError(f"Beacon file is not valid JSON or raw string: {e}")

    if isinstance(j, dict):
        if "randomness" in j:
            beacon = _parse_beacon(j)
            if round_hint is not None and beacon.round != int(round_hint):
                raise OracleError(
                    f"Beacon file round mismatch: file round={beacon.round} vs expected round={round_hint}"
                )
            return beacon

        if round_hint is not None and isinstance(j.get("beacons"), dict):
            entry = j["beacons"].get(str(int(round_hint)))
            if isinstance(entry, dict):
                return _parse_beacon({"round": round_hint, **entry})

    raise OracleError(
        "Could not find a beacon in file. "
        "Expected raw string or JSON with randomness/(beacons[round].randomness)."
    )
