"""
Transaction Submitter orchestrator.

Runs the single lock submission: query balances, estimate cost,
check affordability, submit and wait for the receipt.
"""

from typing import Optional

import structlog

from lock_submitter.chain.interface import ChainClient, ContractCall, EstimationError
from lock_submitter.chain.web3_client import Web3ChainClient
from lock_submitter.config import SubmitterConfig
from lock_submitter.core.models import CostEstimate, RunOutcome, SubmissionResult
from lock_submitter.report import ConsoleReporter

logger = structlog.get_logger(__name__)


def build_lock_call(config: SubmitterConfig) -> ContractCall:
    """Build the lock(user, token, amount, nonce, signature) call, paying amount as value."""
    return ContractCall(
        contract_address=config.contract_address,
        method="lock",
        args=(
            config.user_address,
            config.token_address,
            config.amount,
            config.nonce,
            config.signature,
        ),
        value=config.amount,
    )


class TransactionSubmitter:
    """
    Submits one lock call after checking it is affordable.

    Steps run once each, in order, and any of them may end the run:
    - Connect and load the signing identity
    - Query wallet balance, user balance and gas price
    - Estimate gas for the call (a refusal stops the run before submission)
    - Compare total cost with the wallet balance
    - Sign, broadcast and wait for one confirmation

    Fatal failures (ChainConnectionError, SubmissionError) propagate to the caller.

    Usage:
        ```python
        submitter = TransactionSubmitter(config)
        result = await submitter.run()
        ```
    """

    def __init__(
        self,
        config: SubmitterConfig,
        client: Optional[ChainClient] = None,
        reporter: Optional[ConsoleReporter] = None,
    ):
        """
        Initialize the submitter.

        Args:
            config: Submitter configuration
            client: Custom chain client (Web3ChainClient if not provided)
            reporter: Console reporter (prints to stdout if not provided)
        """
        self.config = config
        self.client = client or Web3ChainClient(config)
        self.reporter = reporter or ConsoleReporter()

    async def run(self, submit: bool = True) -> SubmissionResult:
        """
        Run the submission workflow.

        Args:
            submit: When False, stop after the affordability check

        Returns:
            The run result
        """
        self.reporter.configuration(self.config)

        await self.client.connect()
        try:
            return await self._run(submit)
        finally:
            await self.client.disconnect()

    async def _run(self, submit: bool) -> SubmissionResult:
        config = self.config
        address = self.client.address

        balance = await self.client.get_balance(address)
        user_balance = await self.client.get_balance(config.user_address)
        gas_price = await self.client.get_gas_price()
        self.reporter.wallet(address, balance, user_balance, gas_price)

        result = SubmissionResult(
            outcome=RunOutcome.READY,
            wallet_address=address,
            wallet_balance=balance,
            user_balance=user_balance,
            gas_price=gas_price,
        )

        call = build_lock_call(config)
        self.reporter.transaction_value(call.value)

        try:
            gas_estimate = await self.client.estimate_gas(call)
        except EstimationError as e:
            logger.warning("estimation_failed", error=str(e))
            self.reporter.estimation_failed(e)
            result.outcome = RunOutcome.ESTIMATION_FAILED
            result.error_message = str(e)
            return result

        cost = CostEstimate(gas_estimate=gas_estimate, gas_price=gas_price, value=call.value)
        result.cost = cost
        self.reporter.cost(cost)

        if not cost.is_affordable(balance):
            logger.info("insufficient_funds", total_cost=cost.total_cost, balance=balance)
            self.reporter.insufficient_funds(cost, balance)
            result.outcome = RunOutcome.INSUFFICIENT_FUNDS
            return result
        self.reporter.sufficient_funds()

        if not submit:
            self.reporter.dry_run()
            return result

        tx = await self.client.submit(call, gas_limit=gas_estimate, gas_price=gas_price)
        result.tx_hash = tx.tx_hash
        self.reporter.submitted(tx.tx_hash)

        receipt = await self.client.await_receipt(
            tx,
            timeout_seconds=config.receipt_timeout_seconds,
            poll_seconds=config.receipt_poll_seconds,
        )
        self.reporter.receipt(receipt)

        result.receipt = receipt
        result.outcome = RunOutcome.CONFIRMED if receipt else RunOutcome.RECEIPT_UNAVAILABLE
        logger.info("run_finished", outcome=result.outcome.value, tx_hash=tx.tx_hash)
        return result
