from __future__ import annotations

import hashlib
from typing import Sequence, Tuple

from .errors import NoParticipantsError
from .project_constants import NATIVE_DECIMALS


def to_ether(raw_amount: int) -> float:
    return round(raw_amount / (10**NATIVE_DECIMALS), 6)


def winner_index(random_value: int, participant_count: int) -> int:
    if participant_count <= 0:
        raise NoParticipantsError()
    return random_value % participant_count


def pick_winner(participants: Sequence[str], random_value: int) -> Tuple[int, str]:
    idx = winner_index(random_value, len(participants))
    return idx, participants[idx]


def derive_random_value(beacon_randomness: str, request_id: str) -> Tuple[int, str]:
    """Bind a public beacon value to one request. Returns (value, sha256 hex)."""
    digest_hex = hashlib.sha256(
        (beacon_randomness + request_id).encode("utf-8")
    ).hexdigest()
    return int(digest_hex, 16), digest_hex
