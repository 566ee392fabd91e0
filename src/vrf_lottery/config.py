from __future__ import annotations

import os
from dataclasses import dataclass
from dotenv import load_dotenv

from .project_constants import (
    DEFAULT_BEACON_URL,
    DEFAULT_ENTRY_FEE,
    DEFAULT_KEY_HASH,
    ROUND_DURATION_S,
)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise RuntimeError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    beacon_url: str
    key_hash: str
    entry_fee: int
    round_duration_s: int

    @staticmethod
    def from_env(beacon_url_override: str | None = None) -> "Settings":
        load_dotenv()

        # If user provides --beacon-url, trust it.
        beacon_url = beacon_url_override or os.getenv("BEACON_URL", "").strip() or DEFAULT_BEACON_URL

        key_hash = os.getenv("VRF_KEY_HASH", "").strip() or DEFAULT_KEY_HASH
        try:
            bytes.fromhex(key_hash[2:] if key_hash.startswith("0x") else key_hash)
        except ValueError:
            raise RuntimeError(f"VRF_KEY_HASH is not hex: {key_hash!r}")

        return Settings(
            beacon_url=beacon_url,
            key_hash=key_hash,
            entry_fee=_env_int("ENTRY_FEE_WEI", DEFAULT_ENTRY_FEE),
            round_duration_s=_env_int("ROUND_DURATION_S", ROUND_DURATION_S),
        )
