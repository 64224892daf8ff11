import pytest

from tokenvest.core.constants import MONTH
from tokenvest.core.contracts.erc20 import ERC20Token
from tokenvest.core.vesting.contract import VestingContract

T0 = 1_700_000_000


class ManualClock:
    def __init__(self, start_time: int):
        self.current_time = start_time

    def now(self) -> int:
        return self.current_time

    def advance(self, seconds: int):
        self.current_time += seconds

    def set(self, timestamp: int):
        self.current_time = timestamp


@pytest.fixture
def owner():
    return "0xowner000000000000000000000000000000000001"


@pytest.fixture
def receiver():
    return "0xreceiver0000000000000000000000000000000002"


@pytest.fixture
def stranger():
    return "0xstranger0000000000000000000000000000000003"


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def token(owner):
    return ERC20Token.deploy(owner, initial_supply=100_000)


@pytest.fixture
def vesting(token, owner, clock):
    return VestingContract(token, owner, time_provider=clock.now)


@pytest.fixture
def funded_vesting(vesting, token, owner):
    """Vesting contract holding a pool of 100 tokens."""
    token.transfer(owner, vesting.address, 100)
    return vesting


@pytest.fixture
def month():
    return MONTH
