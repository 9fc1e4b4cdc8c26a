"""
Configuration management for the lock submitter.

Supports configuration via environment variables and .env files.
"""

import re
from typing import List, Optional, Union

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3


_DECIMAL_RE = re.compile(r"^[0-9]+$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")
_UINT256_MAX = 2**256 - 1


class SubmitterError(Exception):
    """Base class for all lock submitter errors."""
    pass


class ConfigError(SubmitterError):
    """Raised when a required setting is missing or malformed."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message)
        self.fields = fields or []


def _parse_unsigned(value: Union[str, int], name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a non-negative integer")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"{name} must be a non-negative integer")
        return value
    text = str(value).strip()
    if not _DECIMAL_RE.match(text):
        raise ValueError(f"{name} must be a non-negative decimal integer, got {value!r}")
    return int(text)


class SubmitterConfig(BaseSettings):
    """
    Configuration settings for a single lock submission.

    Variables are read without a prefix, e.g. RPC_URL, PRIVATE_KEY, AMOUNT.
    The instance is frozen once loaded.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Chain access
    rpc_url: str = Field(description="JSON-RPC endpoint URL")
    private_key: str = Field(
        repr=False,
        description="Hex-encoded signing key of the submitting wallet",
    )
    chain_id: int = Field(description="Chain id used for transaction signing")

    # Call parameters
    contract_address: str = Field(description="Address of the lock contract")
    user_address: str = Field(description="User on whose behalf tokens are locked")
    token_address: str = Field(description="Token being locked")
    amount: int = Field(description="Amount in smallest units, also sent as value")
    nonce: int = Field(description="Authorization nonce checked by the contract")
    signature: bytes = Field(description="Off-chain authorization signature")

    # Receipt wait settings
    receipt_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Maximum time to wait for the transaction receipt",
    )
    receipt_poll_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Delay between receipt polls",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for a single RPC request",
    )

    # Contract ABI
    contract_abi_path: Optional[str] = Field(
        default=None,
        description="JSON ABI file for the contract (built-in lock ABI if unset)",
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )

    @field_validator("rpc_url", "private_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("chain_id", mode="before")
    @classmethod
    def _parse_chain_id(cls, value):
        chain_id = _parse_unsigned(value, "chain id")
        if chain_id == 0:
            raise ValueError("chain id must be positive")
        return chain_id

    @field_validator("amount", "nonce", mode="before")
    @classmethod
    def _parse_amounts(cls, value, info):
        number = _parse_unsigned(value, info.field_name)
        if number > _UINT256_MAX:
            raise ValueError(f"{info.field_name} does not fit in uint256")
        return number

    @field_validator("contract_address", "user_address", "token_address", mode="before")
    @classmethod
    def _parse_address(cls, value):
        text = str(value).strip()
        if not Web3.is_address(text):
            raise ValueError(f"not a valid address: {text!r}")
        return Web3.to_checksum_address(text)

    @field_validator("signature", mode="before")
    @classmethod
    def _parse_signature(cls, value):
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        text = str(value).strip()
        if text[:2] in ("0x", "0X"):
            text = text[2:]
        if len(text) % 2 or not _HEX_RE.match(text):
            raise ValueError("must be an even-length hex string")
        return bytes.fromhex(text)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def signature_hex(self) -> str:
        """Signature as a 0x-prefixed hex string."""
        return "0x" + self.signature.hex()


def load_config(env_file: Optional[str] = ".env", **overrides) -> SubmitterConfig:
    """
    Load and validate the configuration.

    Args:
        env_file: Optional .env file to read in addition to the environment
        **overrides: Values that take precedence over the environment

    Returns:
        The validated, immutable configuration

    Raises:
        ConfigError: If any setting is missing or malformed
    """
    try:
        return SubmitterConfig(_env_file=env_file, **overrides)
    except ValidationError as e:
        fields = []
        problems = []
        for error in e.errors():
            name = str(error["loc"][0]).upper() if error["loc"] else "CONFIG"
            if name not in fields:
                fields.append(name)
            if error["type"] == "missing":
                problems.append(f"{name}: missing")
            else:
                problems.append(f"{name}: {error['msg']}")
        raise ConfigError(
            "Invalid configuration: " + "; ".join(problems),
            fields=fields,
        ) from e
