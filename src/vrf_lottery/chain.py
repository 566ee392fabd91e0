from __future__ import annotations

import logging
import os
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

import base58

from .errors import InsufficientFundsError, InvalidAddressError
from .project_constants import ADDRESS_BYTES

logger = logging.getLogger(__name__)


def generate_address() -> str:
    return base58.b58encode(os.urandom(ADDRESS_BYTES)).decode("ascii")


def normalize_address(value: object) -> str:
    """Return ``value`` if it is a base58 string decoding to a 32-byte key."""
    if not isinstance(value, str) or not value:
        raise InvalidAddressError(value)
    try:
        raw = base58.b58decode(value)
    except ValueError:
        raise InvalidAddressError(value)
    if len(raw) != ADDRESS_BYTES:
        raise InvalidAddressError(value)
    return value


@dataclass(frozen=True)
class LogEntry:
    index: int
    timestamp: int
    emitter: str
    event: str
    args: Dict[str, Any] = field(default_factory=dict)


class HostLedger:
    """
    The shared execution ledger contracts run inside.

    Holds native balances, the clock and an append-only event log. Every
    contract operation runs under ``serialized()``, so calls on the same
    ledger never interleave.
    """

    def __init__(self, start_time: Optional[int] = None) -> None:
        self._now = int(time.time()) if start_time is None else int(start_time)
        self._balances: Dict[str, int] = {}
        self._logs: List[LogEntry] = []
        self._lock = threading.RLock()

    @contextmanager
    def serialized(self) -> Iterator[None]:
        with self._lock:
            yield

    def now(self) -> int:
        return self._now

    def time_travel(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Cannot travel backwards in time")
        with self._lock:
            self._now += int(seconds)
            return self._now

    def balance_of(self, address: str) -> int:
        return self._balances.get(address, 0)

    def set_balance(self, address: str, amount: int) -> None:
        normalize_address(address)
        if amount < 0:
            raise ValueError("Balance cannot be negative")
        with self._lock:
            self._balances[address] = int(amount)

    def transfer(self, src: str, dst: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Transfer amount cannot be negative")
        with self._lock:
            available = self.balance_of(src)
            if available < amount:
                raise InsufficientFundsError(required=amount, available=available)
            self._balances[src] = available - amount
            self._balances[dst] = self.balance_of(dst) + amount
        logger.debug("transfer %s -> %s: %d", src, dst, amount)

    def emit(self, emitter: str, event: str, **args: Any) -> LogEntry:
        with self._lock:
            entry = LogEntry(
                index=len(self._logs),
                timestamp=self._now,
                emitter=emitter,
                event=event,
                args=dict(args),
            )
            self._logs.append(entry)
        return entry

    def logs(self, event: Optional[str] = None, emitter: Optional[str] = None) -> List[LogEntry]:
        out = self._logs
        if event is not None:
            out = [e for e in out if e.event == event]
        if emitter is not None:
            out = [e for e in out if e.emitter == emitter]
        return list(out)
