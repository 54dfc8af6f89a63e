import pytest
from eth_account import Account

from rentable_nft import ManualClock, RentableNFT, RentingConfig

START_TIME = 1_700_000_000


@pytest.fixture(scope="session")
def accounts():
    return [Account.create().address for _ in range(10)]


@pytest.fixture(scope="session")
def owner():
    return Account.create().address


@pytest.fixture(scope="session")
def nft_owner():
    return Account.create().address


@pytest.fixture(scope="session")
def renter():
    return Account.create().address


@pytest.fixture(scope="session")
def guy():
    return Account.create().address


@pytest.fixture(scope="module")
def clock():
    return ManualClock(START_TIME)


@pytest.fixture(scope="module")
def token(clock):
    return RentableNFT(RentingConfig(), clock)


@pytest.fixture(autouse=True)
def restore_clock(clock):
    timestamp = clock.now()
    yield
    clock.time_travel(timestamp=timestamp)
