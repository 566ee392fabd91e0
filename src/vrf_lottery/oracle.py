"""
Randomness oracle gateway.

A consumer asks the oracle for one unpredictable value and gets a request id
back immediately. The value arrives later through the consumer's
``on_randomness_fulfilled(caller, request_id, random_value)`` callback, as a
separate call on the host ledger. Nothing here blocks waiting for it.
"""
from __future__ import annotations

import abc
import hashlib
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

import base58

from .chain import HostLedger, generate_address
from .draw import derive_random_value
from .errors import OracleError, UnknownRequestError
from .rpc import Beacon, BeaconClient

logger = logging.getLogger(__name__)


class RandomnessConsumer(Protocol):
    address: str

    def on_randomness_fulfilled(self, caller: str, request_id: str, random_value: int) -> None:
        ...


@dataclass(frozen=True)
class RandomnessRequest:
    request_id: str
    consumer: RandomnessConsumer
    key_hash: str
    seed: int
    requested_at: int


def compute_request_id(key_hash: str, consumer: str, seed: int, nonce: int) -> str:
    key = bytes.fromhex(key_hash[2:] if key_hash.startswith("0x") else key_hash)
    digest = hashlib.sha256(
        key + consumer.encode("ascii") + seed.to_bytes(32, "big") + nonce.to_bytes(8, "big")
    ).digest()
    return base58.b58encode(digest).decode("ascii")


class RandomnessOracle(abc.ABC):
    """Capability handed to a contract at construction."""

    address: str

    @abc.abstractmethod
    def request_randomness(self, consumer: RandomnessConsumer, key_hash: str, seed: int) -> str:
        """Record a request and return its id without waiting for the value."""


class MockCoordinator(RandomnessOracle):
    """
    In-process oracle. Requests are kept until someone calls ``fulfill``.

    Delivery is not deduplicated: ``fulfill`` may be called again for the same
    request, the way a real oracle may redeliver. Consumers must defend
    themselves against that.
    """

    def __init__(self, host: HostLedger, address: Optional[str] = None) -> None:
        self.host = host
        self.address = address or generate_address()
        self._requests: Dict[str, RandomnessRequest] = {}
        self._order: List[str] = []
        self._delivered: Dict[str, int] = {}
        self._nonce = 0

    def request_randomness(self, consumer: RandomnessConsumer, key_hash: str, seed: int) -> str:
        with self.host.serialized():
            try:
                request_id = compute_request_id(key_hash, consumer.address, seed, self._nonce)
            except ValueError:
                raise OracleError(f"invalid key hash {key_hash!r}")
            self._nonce += 1
            self._requests[request_id] = RandomnessRequest(
                request_id=request_id,
                consumer=consumer,
                key_hash=key_hash,
                seed=seed,
                requested_at=self.host.now(),
            )
            self._order.append(request_id)
        logger.info("Randomness requested: %s by %s", request_id, consumer.address)
        return request_id

    def last_request_id(self) -> Optional[str]:
        return self._order[-1] if self._order else None

    def get_request(self, request_id: str) -> RandomnessRequest:
        req = self._requests.get(request_id)
        if req is None:
            raise UnknownRequestError(request_id)
        return req

    def pending(self) -> List[str]:
        return [r for r in self._order if r not in self._delivered]

    def delivery_count(self, request_id: str) -> int:
        return self._delivered.get(request_id, 0)

    def fulfill(self, request_id: str, random_value: int) -> None:
        req = self.get_request(request_id)
        if random_value < 0:
            raise OracleError("random value must be non-negative")
        with self.host.serialized():
            self._delivered[request_id] = self._delivered.get(request_id, 0) + 1
            logger.info("Delivering randomness for %s", request_id)
            req.consumer.on_randomness_fulfilled(self.address, request_id, random_value)


class BeaconCoordinator(MockCoordinator):
    """Oracle whose values come from a public randomness beacon."""

    def __init__(self, host: HostLedger, client: Optional[BeaconClient] = None, address: Optional[str] = None) -> None:
        super().__init__(host, address=address)
        self.client = client
        self.beacons: Dict[str, Beacon] = {}

    def fulfill_from_beacon(self, request_id: str, beacon: Optional[Beacon] = None, round_no: Optional[int] = None) -> int:
        if beacon is None:
            if self.client is None:
                raise OracleError("no beacon given and no beacon client configured")
            beacon = self.client.get_round(round_no) if round_no else self.client.get_latest()
        value, digest_hex = derive_random_value(beacon.randomness, request_id)
        logger.info("Beacon round %d -> %s", beacon.round, digest_hex)
        self.beacons[request_id] = beacon
        self.fulfill(request_id, value)
        return value
