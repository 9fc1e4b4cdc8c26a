"""
ABI definitions for the lock contract.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional


# lock(address user, address token, uint256 amount, uint256 nonce, bytes signature) payable
LOCK_ABI: List[Dict[str, Any]] = [
    {
        "name": "lock",
        "type": "function",
        "stateMutability": "payable",
        "inputs": [
            {"name": "user", "type": "address"},
            {"name": "token", "type": "address"},
            {"name": "amount", "type": "uint256"},
            {"name": "nonce", "type": "uint256"},
            {"name": "signature", "type": "bytes"},
        ],
        "outputs": [],
    },
]


def load_abi(path: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Load a contract ABI.

    Accepts either a bare ABI list or a compiler artifact with an "abi" key.

    Args:
        path: JSON file to read. The built-in lock ABI is returned if omitted.

    Returns:
        The ABI as a list of entries
    """
    if not path:
        return LOCK_ABI

    abi_path = Path(path)
    if not abi_path.exists():
        raise FileNotFoundError(f"ABI file not found: {path}")

    data = json.loads(abi_path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("abi")
    if not isinstance(data, list):
        raise ValueError(f"ABI file {path} does not contain an ABI list")
    return data
