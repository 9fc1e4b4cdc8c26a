"""
Chain Access Layer.

Provides abstracted access to EVM chain state and transaction submission.
"""

from lock_submitter.chain.interface import (
    ChainClient,
    ChainConnectionError,
    ChainError,
    ContractCall,
    EstimationError,
    Receipt,
    SubmissionError,
    SubmittedTransaction,
)
from lock_submitter.chain.web3_client import Web3ChainClient

__all__ = [
    "ChainClient",
    "ChainConnectionError",
    "ChainError",
    "ContractCall",
    "EstimationError",
    "Receipt",
    "SubmissionError",
    "SubmittedTransaction",
    "Web3ChainClient",
]
