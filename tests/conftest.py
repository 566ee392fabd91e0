"""Shared test fixtures."""

from typing import Callable

import pytest

from vrf_lottery.chain import HostLedger, generate_address
from vrf_lottery.lottery import Lottery
from vrf_lottery.oracle import MockCoordinator
from vrf_lottery.project_constants import DEFAULT_ENTRY_FEE

START_TIME = 1_700_000_000
FEE = DEFAULT_ENTRY_FEE
ONE_ETHER = 10**18


@pytest.fixture
def host() -> HostLedger:
    return HostLedger(start_time=START_TIME)


@pytest.fixture
def operator() -> str:
    return generate_address()


@pytest.fixture
def oracle(host: HostLedger) -> MockCoordinator:
    return MockCoordinator(host)


@pytest.fixture
def lottery(host: HostLedger, oracle: MockCoordinator, operator: str) -> Lottery:
    return Lottery(host, oracle, operator=operator, entry_fee=FEE)


@pytest.fixture
def funded(host: HostLedger) -> Callable[[], str]:
    """Factory for addresses holding one ether."""

    def _make() -> str:
        addr = generate_address()
        host.set_balance(addr, ONE_ETHER)
        return addr

    return _make
