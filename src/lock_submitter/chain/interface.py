"""
Abstract interface for EVM chain access.

Defines the contract for blockchain access that the submitter relies on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from lock_submitter.config import SubmitterError


@dataclass(frozen=True)
class ContractCall:
    """A payable contract method invocation."""
    contract_address: str
    method: str
    args: Tuple[Any, ...]
    value: int = 0                      # Attached native value in wei


@dataclass(frozen=True)
class SubmittedTransaction:
    """Handle of a broadcast transaction."""
    tx_hash: str


@dataclass(frozen=True)
class Receipt:
    """Outcome of a mined transaction."""
    tx_hash: str
    block_number: Optional[int]
    gas_used: Optional[int]
    status: Optional[int]               # 1 = success, anything else = failure

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @property
    def status_label(self) -> str:
        return "Success" if self.succeeded else "Failed"


class ChainClient(ABC):
    """
    Abstract interface for chain access.

    This interface defines all blockchain operations needed by the submitter:
    - Balance and gas price queries
    - Gas estimation of a contract call
    - Transaction signing and submission
    - Receipt monitoring
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish the connection and load the signing identity.

        Raises:
            ChainConnectionError: If the endpoint is unreachable or the key is malformed
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection."""
        pass

    @property
    @abstractmethod
    def address(self) -> str:
        """Checksum address of the signing account."""
        pass

    @abstractmethod
    async def get_balance(self, address: str) -> int:
        """
        Get the native balance of an address.

        Args:
            address: Account address

        Returns:
            Balance in wei
        """
        pass

    @abstractmethod
    async def get_gas_price(self) -> int:
        """Get the network-recommended gas price in wei."""
        pass

    @abstractmethod
    async def estimate_gas(self, call: ContractCall) -> int:
        """
        Estimate gas units for a call sent from the signing account.

        Args:
            call: The contract call, including attached value

        Returns:
            Estimated gas units

        Raises:
            EstimationError: If the call would revert or the node rejects it
        """
        pass

    @abstractmethod
    async def submit(
        self,
        call: ContractCall,
        gas_limit: Optional[int] = None,
        gas_price: Optional[int] = None,
    ) -> SubmittedTransaction:
        """
        Sign and broadcast a contract call.

        Args:
            call: The contract call to send
            gas_limit: Gas limit (estimated by the node if omitted)
            gas_price: Gas price in wei (node default if omitted)

        Returns:
            Handle of the broadcast transaction

        Raises:
            SubmissionError: If the broadcast is rejected
        """
        pass

    @abstractmethod
    async def await_receipt(
        self,
        tx: SubmittedTransaction,
        timeout_seconds: float = 120,
        poll_seconds: float = 2.0,
    ) -> Optional[Receipt]:
        """
        Wait until the transaction is mined (one confirmation).

        Args:
            tx: Handle returned by submit()
            timeout_seconds: Maximum time to wait
            poll_seconds: Delay between polls

        Returns:
            The receipt, or None if none was observed within the timeout
        """
        pass


class ChainError(SubmitterError):
    """Base class for chain access failures."""
    pass


class ChainConnectionError(ChainError, ConnectionError):
    """Raised when the endpoint or signing identity cannot be set up."""
    pass


class EstimationError(ChainError):
    """Raised when the node refuses to estimate a call, usually a revert."""
    pass


class SubmissionError(ChainError):
    """Raised when transaction submission fails."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code
