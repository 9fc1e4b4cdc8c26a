"""
Core submitter components.

This module contains the submission models and the workflow orchestration.
"""

from lock_submitter.core.models import CostEstimate, RunOutcome, SubmissionResult
from lock_submitter.core.submitter import TransactionSubmitter, build_lock_call

__all__ = [
    "CostEstimate",
    "RunOutcome",
    "SubmissionResult",
    "TransactionSubmitter",
    "build_lock_call",
]
