"""
Web3 adapter for chain access.

Provides blockchain access over JSON-RPC using AsyncWeb3 and a local
eth-account signing key.
"""

import asyncio
from typing import Any, Awaitable, Optional

import structlog
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from lock_submitter.chain.abi import load_abi
from lock_submitter.chain.interface import (
    ChainClient,
    ChainConnectionError,
    ContractCall,
    EstimationError,
    Receipt,
    SubmissionError,
    SubmittedTransaction,
)
from lock_submitter.config import SubmitterConfig

logger = structlog.get_logger(__name__)

# Transport failures surfaced by the HTTP provider
_TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError)


class Web3ChainClient(ChainClient):
    """
    JSON-RPC adapter.

    Implements the ChainClient using AsyncWeb3's HTTP provider.
    """

    def __init__(self, config: SubmitterConfig):
        """
        Initialize the adapter.

        Args:
            config: Submitter configuration
        """
        self.config = config
        self.rpc_url = config.rpc_url
        self._w3: Optional[AsyncWeb3] = None
        self._account: Optional[LocalAccount] = None
        self._abi = None

    @property
    def address(self) -> str:
        if self._account is None:
            raise ChainConnectionError("Chain client is not connected")
        return self._account.address

    @property
    def w3(self) -> AsyncWeb3:
        if self._w3 is None:
            raise ChainConnectionError("Chain client is not connected")
        return self._w3

    async def connect(self) -> None:
        """Load the signing key, create the provider and check the endpoint."""
        if self._w3 is not None:
            return

        try:
            self._account = Account.from_key(self.config.private_key)
        except Exception as e:
            raise ChainConnectionError(f"Malformed private key: {e}") from e

        try:
            self._abi = load_abi(self.config.contract_abi_path)
        except (OSError, ValueError) as e:
            raise ChainConnectionError(f"Failed to load contract ABI: {e}") from e

        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
            self.rpc_url,
            request_kwargs={"timeout": self.config.request_timeout_seconds},
        ))

        try:
            await self._check_endpoint(w3)
        except ChainConnectionError:
            await _close_provider(w3)
            raise

        self._w3 = w3
        logger.info("chain_connected", rpc_url=self.rpc_url, address=self._account.address)

    async def _check_endpoint(self, w3: AsyncWeb3) -> None:
        try:
            connected = await w3.is_connected()
        except _TRANSPORT_ERRORS as e:
            raise ChainConnectionError(f"Failed to connect to {self.rpc_url}: {e}") from e
        if not connected:
            raise ChainConnectionError(f"RPC endpoint unreachable: {self.rpc_url}")

        node_chain_id = await self._query(w3.eth.chain_id, "chain_id")
        if node_chain_id != self.config.chain_id:
            logger.warning(
                "chain_id_mismatch",
                configured=self.config.chain_id,
                node=node_chain_id,
            )

    async def disconnect(self) -> None:
        """Close the provider session."""
        if self._w3 is None:
            return
        await _close_provider(self._w3)
        self._w3 = None
        logger.info("chain_disconnected")

    async def _query(self, pending: Awaitable[Any], what: str) -> Any:
        """Await a read-only RPC query, mapping failures to ChainConnectionError."""
        try:
            return await pending
        except (Web3Exception, ValueError, *_TRANSPORT_ERRORS) as e:
            logger.error("chain_query_failed", query=what, error=str(e))
            raise ChainConnectionError(f"RPC query {what} failed: {e}") from e

    def _bound_function(self, call: ContractCall):
        contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(call.contract_address),
            abi=self._abi,
        )
        return contract.functions[call.method](*call.args)

    async def get_balance(self, address: str) -> int:
        """Get the wei balance of an address at the latest block."""
        balance = await self._query(
            self.w3.eth.get_balance(Web3.to_checksum_address(address)),
            "get_balance",
        )
        return int(balance)

    async def get_gas_price(self) -> int:
        """Get the current gas price in wei."""
        return int(await self._query(self.w3.eth.gas_price, "gas_price"))

    async def estimate_gas(self, call: ContractCall) -> int:
        """Estimate gas for the call sent from the signing account."""
        sender = self.address
        try:
            fn = self._bound_function(call)
            gas = await fn.estimate_gas({"from": sender, "value": call.value})
        except ContractLogicError as e:
            logger.warning("gas_estimation_reverted", method=call.method, error=str(e))
            raise EstimationError(f"Call would revert: {e}") from e
        except (Web3Exception, ValueError) as e:
            logger.warning("gas_estimation_failed", method=call.method, error=str(e))
            raise EstimationError(f"Gas estimation failed: {e}") from e
        except _TRANSPORT_ERRORS as e:
            raise ChainConnectionError(f"Gas estimation request failed: {e}") from e

        logger.debug("gas_estimated", method=call.method, gas=gas)
        return int(gas)

    async def submit(
        self,
        call: ContractCall,
        gas_limit: Optional[int] = None,
        gas_price: Optional[int] = None,
    ) -> SubmittedTransaction:
        """Sign the call with the local key and broadcast it."""
        sender = self.address
        w3 = self.w3

        try:
            fn = self._bound_function(call)
            tx_params = {
                "from": sender,
                "value": call.value,
                "chainId": self.config.chain_id,
                "nonce": await w3.eth.get_transaction_count(sender, "pending"),
            }
            if gas_limit is not None:
                tx_params["gas"] = gas_limit
            if gas_price is not None:
                tx_params["gasPrice"] = gas_price

            tx = await fn.build_transaction(tx_params)
            signed = self._account.sign_transaction(tx)
            tx_hash = await w3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, ValueError, *_TRANSPORT_ERRORS) as e:
            logger.error("tx_submit_failed", method=call.method, error=str(e))
            code = getattr(e, "rpc_response", None)
            if isinstance(code, dict):
                code = (code.get("error") or {}).get("code")
            raise SubmissionError(
                f"Transaction submission failed: {e}",
                error_code=str(code) if code is not None else None,
            ) from e

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info("tx_submitted", tx_hash=tx_hash_hex)
        return SubmittedTransaction(tx_hash=tx_hash_hex)

    async def await_receipt(
        self,
        tx: SubmittedTransaction,
        timeout_seconds: float = 120,
        poll_seconds: float = 2.0,
    ) -> Optional[Receipt]:
        """Poll for the receipt until mined or the timeout expires."""
        try:
            data = await self.w3.eth.wait_for_transaction_receipt(
                tx.tx_hash,
                timeout=timeout_seconds,
                poll_latency=poll_seconds,
            )
        except TimeExhausted:
            logger.warning("receipt_timeout", tx_hash=tx.tx_hash, timeout=timeout_seconds)
            return None
        except (Web3Exception, ValueError, *_TRANSPORT_ERRORS) as e:
            logger.warning("receipt_wait_aborted", tx_hash=tx.tx_hash, error=str(e))
            return None

        receipt = receipt_from_rpc(tx.tx_hash, data)
        logger.info(
            "tx_confirmed",
            tx_hash=tx.tx_hash,
            block=receipt.block_number,
            status=receipt.status,
        )
        return receipt


async def _close_provider(w3: AsyncWeb3) -> None:
    provider = w3.provider
    if hasattr(provider, "disconnect"):
        await provider.disconnect()


def receipt_from_rpc(tx_hash: str, data: Any) -> Receipt:
    """Convert an RPC receipt mapping into a Receipt."""
    def _int(key: str) -> Optional[int]:
        value = data.get(key)
        return int(value) if value is not None else None

    return Receipt(
        tx_hash=tx_hash,
        block_number=_int("blockNumber"),
        gas_used=_int("gasUsed"),
        status=_int("status"),
    )
