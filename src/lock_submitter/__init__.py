"""
Lock Submitter

Submits a single signed lock(user, token, amount, nonce, signature) call to an
EVM contract after checking that the wallet can pay for it.
"""

__version__ = "0.1.0"

from lock_submitter.config import ConfigError, SubmitterConfig, SubmitterError, load_config
from lock_submitter.core.models import CostEstimate, RunOutcome, SubmissionResult
from lock_submitter.core.submitter import TransactionSubmitter

__all__ = [
    "ConfigError",
    "CostEstimate",
    "RunOutcome",
    "SubmissionResult",
    "SubmitterConfig",
    "SubmitterError",
    "TransactionSubmitter",
    "load_config",
]
