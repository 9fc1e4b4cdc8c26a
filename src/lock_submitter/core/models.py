"""
Submission models.

Cost estimate and run result of a single lock submission.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from lock_submitter.chain.interface import Receipt


class RunOutcome(str, Enum):
    """Terminal state of a run."""
    CONFIRMED = "confirmed"                     # Receipt observed (success or failure status)
    RECEIPT_UNAVAILABLE = "receipt_unavailable" # Submitted, no receipt within the wait
    INSUFFICIENT_FUNDS = "insufficient_funds"   # Total cost exceeds wallet balance
    ESTIMATION_FAILED = "estimation_failed"     # Node refused to estimate the call
    READY = "ready"                             # Check only: affordable, not submitted

    @property
    def exit_code(self) -> int:
        """Process exit code for this outcome."""
        if self is RunOutcome.ESTIMATION_FAILED:
            return 3
        return 0


@dataclass(frozen=True)
class CostEstimate:
    """
    Estimated cost of sending a call.

    Attributes:
        gas_estimate: Gas units the node expects the call to use
        gas_price: Gas price in wei
        value: Native value attached to the call in wei
    """
    gas_estimate: int
    gas_price: int
    value: int

    @property
    def gas_cost(self) -> int:
        return self.gas_estimate * self.gas_price

    @property
    def total_cost(self) -> int:
        return self.gas_cost + self.value

    def is_affordable(self, balance: int) -> bool:
        """Check whether a balance covers the total cost."""
        return self.total_cost <= balance


@dataclass
class SubmissionResult:
    """
    Result of a submitter run.

    Attributes:
        outcome: Terminal state of the run
        wallet_address: Address of the submitting account
        wallet_balance: Submitting account balance before submission
        user_balance: Balance of the user the lock is made for
        gas_price: Gas price observed before estimation
        cost: Cost estimate, if estimation succeeded
        tx_hash: Hash of the broadcast transaction
        receipt: Receipt of the mined transaction
        error_message: Estimation error text
    """

    outcome: RunOutcome
    wallet_address: str
    wallet_balance: int
    user_balance: int
    gas_price: int
    cost: Optional[CostEstimate] = None
    tx_hash: Optional[str] = None
    receipt: Optional[Receipt] = None
    error_message: Optional[str] = None

    @property
    def submitted(self) -> bool:
        return self.tx_hash is not None

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code
