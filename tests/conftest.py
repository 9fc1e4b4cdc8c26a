"""
Pytest configuration and shared fixtures for the test suite.
"""

import io
from typing import Dict, List, Optional, Tuple

import pytest

from lock_submitter.chain.interface import (
    ChainClient,
    ContractCall,
    Receipt,
    SubmittedTransaction,
)
from lock_submitter.config import SubmitterConfig
from lock_submitter.report import ConsoleReporter


WALLET_ADDRESS = "0x" + "aa" * 20
CONTRACT_ADDRESS = "0x" + "11" * 20
USER_ADDRESS = "0x" + "22" * 20
TOKEN_ADDRESS = "0x" + "33" * 20
TEST_PRIVATE_KEY = "0x" + "4c" * 32
TEST_SIGNATURE = "0x" + "ab" * 65
TEST_TX_HASH = "0x" + "de" * 32

ONE_ETHER = 10**18


# ============================================================================
# Configuration Fixtures
# ============================================================================

def make_env(**overrides) -> Dict[str, str]:
    """Environment variables for a complete configuration."""
    env = {
        "RPC_URL": "http://localhost:8545",
        "PRIVATE_KEY": TEST_PRIVATE_KEY,
        "CHAIN_ID": "31337",
        "CONTRACT_ADDRESS": CONTRACT_ADDRESS,
        "USER_ADDRESS": USER_ADDRESS,
        "TOKEN_ADDRESS": TOKEN_ADDRESS,
        "AMOUNT": str(ONE_ETHER),
        "NONCE": "7",
        "SIGNATURE": TEST_SIGNATURE,
    }
    env.update(overrides)
    return env


def make_config(**overrides) -> SubmitterConfig:
    """Create a configuration without reading the environment file."""
    values = {key.lower(): value for key, value in make_env().items()}
    values.update(overrides)
    return SubmitterConfig(_env_file=None, **values)


@pytest.fixture
def test_config() -> SubmitterConfig:
    """Create a test configuration."""
    return make_config()


@pytest.fixture
def submitter_env(monkeypatch) -> Dict[str, str]:
    """Populate the process environment with a complete configuration."""
    env = make_env()
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


# ============================================================================
# Fake Chain Client
# ============================================================================

class FakeChainClient(ChainClient):
    """In-memory chain client that records every call."""

    def __init__(
        self,
        balances: Optional[Dict[str, int]] = None,
        gas_price: int = 50,
        gas_estimate: int = 21000,
        estimate_error: Optional[Exception] = None,
        submit_error: Optional[Exception] = None,
        receipt_status: Optional[int] = 1,
        mined: bool = True,
    ):
        self.balances = {k.lower(): v for k, v in (balances or {}).items()}
        self.gas_price = gas_price
        self.gas_estimate = gas_estimate
        self.estimate_error = estimate_error
        self.submit_error = submit_error
        self.receipt_status = receipt_status
        self.mined = mined

        self.calls: List[str] = []
        self.estimated: List[ContractCall] = []
        self.submitted: List[Tuple[ContractCall, Optional[int], Optional[int]]] = []
        self.receipt_requests: List[SubmittedTransaction] = []
        self.connected = False

    @property
    def address(self) -> str:
        return WALLET_ADDRESS

    async def connect(self) -> None:
        self.calls.append("connect")
        self.connected = True

    async def disconnect(self) -> None:
        self.calls.append("disconnect")
        self.connected = False

    async def get_balance(self, address: str) -> int:
        self.calls.append("get_balance")
        return self.balances.get(address.lower(), 0)

    async def get_gas_price(self) -> int:
        self.calls.append("get_gas_price")
        return self.gas_price

    async def estimate_gas(self, call: ContractCall) -> int:
        self.calls.append("estimate_gas")
        self.estimated.append(call)
        if self.estimate_error is not None:
            raise self.estimate_error
        return self.gas_estimate

    async def submit(
        self,
        call: ContractCall,
        gas_limit: Optional[int] = None,
        gas_price: Optional[int] = None,
    ) -> SubmittedTransaction:
        self.calls.append("submit")
        self.submitted.append((call, gas_limit, gas_price))
        if self.submit_error is not None:
            raise self.submit_error
        return SubmittedTransaction(tx_hash=TEST_TX_HASH)

    async def await_receipt(
        self,
        tx: SubmittedTransaction,
        timeout_seconds: float = 120,
        poll_seconds: float = 2.0,
    ) -> Optional[Receipt]:
        self.calls.append("await_receipt")
        self.receipt_requests.append(tx)
        if not self.mined:
            return None
        return Receipt(
            tx_hash=tx.tx_hash,
            block_number=1234,
            gas_used=self.gas_estimate,
            status=self.receipt_status,
        )


@pytest.fixture
def fake_client() -> FakeChainClient:
    """Fake client whose wallet can afford the default call."""
    return FakeChainClient(balances={WALLET_ADDRESS: 999_999_999_999_999_999_999})


@pytest.fixture
def reporter_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def reporter(reporter_output) -> ConsoleReporter:
    """Reporter writing to an in-memory buffer."""
    return ConsoleReporter(reporter_output)

