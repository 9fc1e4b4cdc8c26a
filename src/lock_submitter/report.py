"""
Console reporting for the lock submitter.
"""

import sys
from typing import Optional, TextIO

from web3 import Web3

from lock_submitter.chain.interface import Receipt
from lock_submitter.config import SubmitterConfig
from lock_submitter.core.models import CostEstimate


def format_ether(wei: int) -> str:
    return f"{Web3.from_wei(wei, 'ether')} ETH"


def format_gwei(wei: int) -> str:
    return f"{Web3.from_wei(wei, 'gwei')} Gwei"


class ConsoleReporter:
    """
    Prints run progress grouped under section headings.

    Never prints the private key.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def _line(self, text: str = "") -> None:
        print(text, file=self.stream)

    def _heading(self, title: str) -> None:
        self._line(f"=== {title} ===")

    def configuration(self, config: SubmitterConfig) -> None:
        self._heading("Configuration")
        self._line(f"RPC URL: {config.rpc_url}")
        self._line(f"Chain ID: {config.chain_id}")
        self._line(f"Contract Address: {config.contract_address}")
        self._line(f"User Address: {config.user_address}")
        self._line(f"Token Address: {config.token_address}")
        self._line(f"Amount: {config.amount}")
        self._line(f"Nonce: {config.nonce}")
        self._line(f"Signature: {config.signature_hex}")
        self._line()

    def wallet(self, address: str, balance: int, user_balance: int, gas_price: int) -> None:
        self._heading("Wallet Information")
        self._line(f"Wallet Address: {address}")
        self._line(f"Wallet Balance: {format_ether(balance)}")
        self._line(f"User Balance: {format_ether(user_balance)}")
        self._line(f"Current Gas Price: {format_gwei(gas_price)}")
        self._line()

    def transaction_value(self, value: int) -> None:
        self._heading("Transaction Details")
        self._line(f"Transaction Value: {format_ether(value)}")

    def estimation_failed(self, error: Exception) -> None:
        self._line(f"❌ Failed to estimate gas: {error}")
        self._line("This might be due to insufficient funds or invalid parameters")
        self._line("Transaction not sent.")
        self._line()

    def cost(self, cost: CostEstimate) -> None:
        self._line(f"Estimated Gas: {cost.gas_estimate}")
        self._line(f"Total Transaction Cost: {format_ether(cost.total_cost)}")

    def insufficient_funds(self, cost: CostEstimate, balance: int) -> None:
        self._line(
            f"❌ INSUFFICIENT FUNDS: Need {format_ether(cost.total_cost)}, "
            f"but wallet has {format_ether(balance)}"
        )
        self._line()

    def sufficient_funds(self) -> None:
        self._line("✅ Sufficient funds available")
        self._line()

    def dry_run(self) -> None:
        self._heading("Dry Run")
        self._line("Checks passed, transaction not sent.")

    def submitted(self, tx_hash: str) -> None:
        self._heading("Sending Transaction")
        self._line(f"Transaction Hash: {tx_hash}")
        self._line("Waiting for transaction to be mined...")

    def receipt(self, receipt: Optional[Receipt]) -> None:
        if receipt is None:
            self._line("❌ Transaction receipt not found")
            return
        self._line(f"✅ Transaction mined in block: {receipt.block_number}")
        self._line(f"Gas Used: {receipt.gas_used if receipt.gas_used is not None else 0}")
        self._line(f"Status: {receipt.status_label}")
