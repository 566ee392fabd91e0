"""Fee-entry draw contract settled by an asynchronous randomness oracle."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set, Tuple

from .chain import HostLedger, generate_address, normalize_address
from .clock import RoundClock
from .draw import pick_winner
from .errors import (
    AlreadySettledError,
    InvalidAmountError,
    InvalidFeeError,
    NoParticipantsError,
    RequestAlreadyOutstandingError,
    UnauthorizedError,
    UnknownRequestError,
    WindowClosedError,
    WindowStillOpenError,
)
from .oracle import RandomnessOracle
from .participants import ParticipantLedger
from .project_constants import DEFAULT_ENTRY_FEE, DEFAULT_KEY_HASH, ROUND_DURATION_S

logger = logging.getLogger(__name__)


class DrawState(str, Enum):
    OPEN = "OPEN"
    AWAITING_DRAW = "AWAITING_DRAW"
    PENDING_RANDOMNESS = "PENDING_RANDOMNESS"
    SETTLED = "SETTLED"


@dataclass(frozen=True)
class DrawRequest:
    request_id: str
    requested_by: str
    round_id: int
    key_hash: str
    seed: int


@dataclass(frozen=True)
class Outcome:
    round_id: int
    winner: str
    payout: int
    winner_index: int
    request_id: str
    random_value: int
    participants: Tuple[str, ...]
    settled_at: int


class Lottery:
    """
    One active round at a time.

    OPEN -> AWAITING_DRAW once the window elapses, -> PENDING_RANDOMNESS when
    the operator requests a draw, -> SETTLED on the oracle callback, which
    immediately starts the next OPEN round.
    """

    def __init__(
        self,
        host: HostLedger,
        oracle: RandomnessOracle,
        operator: str,
        key_hash: str = DEFAULT_KEY_HASH,
        entry_fee: int = DEFAULT_ENTRY_FEE,
        round_duration: int = ROUND_DURATION_S,
        address: Optional[str] = None,
    ) -> None:
        if entry_fee <= 0:
            raise InvalidFeeError(entry_fee)
        if round_duration <= 0:
            raise ValueError("round_duration must be positive")
        self.host = host
        self.oracle = oracle
        self.operator = normalize_address(operator)
        self.key_hash = key_hash
        self.address = address or generate_address()
        self._entry_fee = entry_fee
        self._round_duration = round_duration

        self._round_id = 1
        self._clock = RoundClock(start_time=host.now(), duration=round_duration)
        self._participants = ParticipantLedger()
        self._outstanding: Optional[DrawRequest] = None
        self._settled: Set[str] = set()
        self._outcomes: List[Outcome] = []
        self.host.emit(self.address, "RoundStarted", round_id=self._round_id, start_time=self._clock.start_time)

    # --- state-mutating operations ---

    def enter(self, caller: str, value: int) -> int:
        """Buy one ticket. Returns the entrant's index in join order."""
        caller = normalize_address(caller)
        with self.host.serialized():
            if value != self._entry_fee:
                logger.debug("Entry rejected for %s: paid %d, fee %d", caller, value, self._entry_fee)
                raise InvalidAmountError(expected=self._entry_fee, paid=value)
            if self._outstanding is not None or not self._clock.is_entry_open(self.host.now()):
                logger.debug("Entry rejected for %s: window closed", caller)
                raise WindowClosedError()

            # no entry without funds
            self.host.transfer(caller, self.address, value)
            index = self._participants.append(caller)
            self.host.emit(self.address, "TicketPurchased", round_id=self._round_id, player=caller, index=index)
        logger.info("Round %d: ticket #%d for %s", self._round_id, index, caller)
        return index

    def request_random_winner(self, caller: str) -> str:
        caller = normalize_address(caller)
        with self.host.serialized():
            if caller != self.operator:
                logger.debug("Draw request rejected: %s is not the operator", caller)
                raise UnauthorizedError(caller)
            if self._outstanding is not None:
                raise RequestAlreadyOutstandingError(self._outstanding.request_id)
            if self._clock.is_entry_open(self.host.now()):
                raise WindowStillOpenError(self._clock.closes_at)
            if self._participants.size() == 0:
                raise NoParticipantsError()

            request_id = self.oracle.request_randomness(self, self.key_hash, self._round_id)
            self._outstanding = DrawRequest(
                request_id=request_id,
                requested_by=caller,
                round_id=self._round_id,
                key_hash=self.key_hash,
                seed=self._round_id,
            )
            self.host.emit(self.address, "RandomnessRequested", round_id=self._round_id, request_id=request_id)
        logger.info("Round %d: draw requested (%s)", self._round_id, request_id)
        return request_id

    def on_randomness_fulfilled(self, caller: str, request_id: str, random_value: int) -> Outcome:
        caller = normalize_address(caller)
        with self.host.serialized():
            if caller != self.oracle.address:
                raise UnauthorizedError(caller, role="oracle")
            if request_id in self._settled:
                logger.warning("Ignoring redelivery for settled request %s", request_id)
                raise AlreadySettledError(request_id)
            if self._outstanding is None or self._outstanding.request_id != request_id:
                raise UnknownRequestError(request_id)

            participants = self._participants.snapshot()
            if not participants:
                raise NoParticipantsError()
            index, winner = pick_winner(participants, random_value)
            payout = self.pool_balance()

            self.host.transfer(self.address, winner, payout)
            outcome = Outcome(
                round_id=self._round_id,
                winner=winner,
                payout=payout,
                winner_index=index,
                request_id=request_id,
                random_value=random_value,
                participants=participants,
                settled_at=self.host.now(),
            )
            self._outcomes.append(outcome)
            self._settled.add(request_id)
            self.host.emit(
                self.address,
                "WinnerPicked",
                round_id=self._round_id,
                winner=winner,
                payout=payout,
                state=DrawState.SETTLED.value,
            )
            self._start_next_round()
        logger.info("Round %d settled: %s wins %d", outcome.round_id, winner, payout)
        return outcome

    def _start_next_round(self) -> None:
        self._round_id += 1
        self._clock = RoundClock(start_time=self.host.now(), duration=self._round_duration)
        self._participants = ParticipantLedger()
        self._outstanding = None
        self.host.emit(self.address, "RoundStarted", round_id=self._round_id, start_time=self._clock.start_time)

    # --- read accessors ---

    @property
    def state(self) -> DrawState:
        if self._outstanding is not None:
            return DrawState.PENDING_RANDOMNESS
        if self._clock.is_entry_open(self.host.now()):
            return DrawState.OPEN
        return DrawState.AWAITING_DRAW

    @property
    def round_id(self) -> int:
        return self._round_id

    @property
    def clock(self) -> RoundClock:
        return self._clock

    @property
    def outstanding_request(self) -> Optional[DrawRequest]:
        return self._outstanding

    @property
    def outcomes(self) -> Tuple[Outcome, ...]:
        return tuple(self._outcomes)

    def is_entry_open(self) -> bool:
        return self._clock.is_entry_open(self.host.now())

    def closes_at(self) -> int:
        return self._clock.closes_at

    def participant_at(self, index: int) -> str:
        return self._participants.participant_at(index)

    def size(self) -> int:
        return self._participants.size()

    def most_recent_winner(self) -> Optional[str]:
        return self._outcomes[-1].winner if self._outcomes else None

    def pool_balance(self) -> int:
        return self.host.balance_of(self.address)

    def current_fee(self) -> int:
        return self._entry_fee
