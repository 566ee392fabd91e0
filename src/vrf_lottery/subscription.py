"""Recurring-subscription billing contract.

Shares nothing with the draw contract except the host ledger. Fees are paid
in the host ledger's native balance.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Set

from .chain import HostLedger, generate_address, normalize_address
from .errors import (
    AlreadySubscribedError,
    InsufficientFundsError,
    InvalidFeeError,
    NotSubscribedError,
    PaymentNotDueError,
    UnauthorizedError,
    UserPausedError,
)
from .project_constants import SUBSCRIPTION_PERIOD_S

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(
        self,
        host: HostLedger,
        owner: str,
        subscription_fee: int,
        period: int = SUBSCRIPTION_PERIOD_S,
        address: Optional[str] = None,
    ) -> None:
        if subscription_fee <= 0:
            raise InvalidFeeError(subscription_fee)
        self.host = host
        self.owner = normalize_address(owner)
        self.period = period
        self.address = address or generate_address()
        self._fee = subscription_fee
        self._next_due: Dict[str, int] = {}
        self._paused: Set[str] = set()

    @property
    def subscription_fee(self) -> int:
        return self._fee

    def _only_owner(self, caller: str) -> None:
        if normalize_address(caller) != self.owner:
            raise UnauthorizedError(caller, role="owner")

    def subscribe(self, caller: str) -> int:
        caller = normalize_address(caller)
        with self.host.serialized():
            if self._next_due.get(caller, 0) > 0:
                raise AlreadySubscribedError()
            if caller in self._paused:
                raise UserPausedError(caller)
            self.host.transfer(caller, self.address, self._fee)
            due = self.host.now() + self.period
            self._next_due[caller] = due
            self.host.emit(self.address, "Subscribed", user=caller, next_payment_due=due)
        logger.info("Subscribed %s, next payment due %d", caller, due)
        return due

    def unsubscribe(self, caller: str) -> None:
        caller = normalize_address(caller)
        with self.host.serialized():
            if self._next_due.get(caller, 0) == 0:
                raise NotSubscribedError()
            del self._next_due[caller]
            self.host.emit(self.address, "Unsubscribed", user=caller)
        logger.info("Unsubscribed %s", caller)

    def charge_subscription(self, caller: str, user: str) -> int:
        user = normalize_address(user)
        with self.host.serialized():
            self._only_owner(caller)
            due = self._next_due.get(user, 0)
            if due == 0:
                raise NotSubscribedError()
            if user in self._paused:
                raise UserPausedError(user)
            if self.host.now() < due:
                raise PaymentNotDueError(due)
            self.host.transfer(user, self.address, self._fee)
            next_due = due + self.period
            self._next_due[user] = next_due
            self.host.emit(self.address, "SubscriptionCharged", user=user, amount=self._fee, next_payment_due=next_due)
        logger.info("Charged %s %d", user, self._fee)
        return next_due

    def pause_user(self, caller: str, user: str) -> None:
        user = normalize_address(user)
        with self.host.serialized():
            self._only_owner(caller)
            self._paused.add(user)
            self.host.emit(self.address, "UserPaused", user=user)

    def unpause_user(self, caller: str, user: str) -> None:
        user = normalize_address(user)
        with self.host.serialized():
            self._only_owner(caller)
            self._paused.discard(user)
            self.host.emit(self.address, "UserUnpaused", user=user)

    def is_paused(self, user: str) -> bool:
        return normalize_address(user) in self._paused

    def update_subscription_fee(self, caller: str, new_fee: int) -> None:
        with self.host.serialized():
            self._only_owner(caller)
            if new_fee <= 0:
                raise InvalidFeeError(new_fee)
            old_fee, self._fee = self._fee, new_fee
            self.host.emit(self.address, "FeeUpdated", old_fee=old_fee, new_fee=new_fee)
        logger.info("Subscription fee %d -> %d", old_fee, new_fee)

    def withdraw_tokens(self, caller: str, to: str, amount: int) -> None:
        to = normalize_address(to)
        with self.host.serialized():
            self._only_owner(caller)
            if amount <= 0:
                raise ValueError("Withdraw amount must be positive")
            available = self.host.balance_of(self.address)
            if amount > available:
                raise InsufficientFundsError(required=amount, available=available)
            self.host.transfer(self.address, to, amount)
            self.host.emit(self.address, "Withdrawn", to=to, amount=amount)
        logger.info("Withdrew %d to %s", amount, to)

    def next_payment_due(self, user: str) -> int:
        return self._next_due.get(normalize_address(user), 0)
