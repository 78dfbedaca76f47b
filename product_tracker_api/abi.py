"""
ProductTracker contract interface.
"""

import json
from pathlib import Path
from typing import Any, Optional


PRODUCT_TRACKER_ABI: list[dict[str, Any]] = [
    {
        "inputs": [
            {"internalType": "uint256", "name": "_productId", "type": "uint256"},
            {"internalType": "string", "name": "_status", "type": "string"},
            {"internalType": "string", "name": "_location", "type": "string"},
            {"internalType": "string", "name": "_sensorData", "type": "string"},
        ],
        "name": "addUpdate",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "string", "name": "_productName", "type": "string"},
        ],
        "name": "createProduct",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "uint256", "name": "productId", "type": "uint256"},
            {"indexed": False, "internalType": "string", "name": "status", "type": "string"},
        ],
        "name": "ProductUpdated",
        "type": "event",
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "_productId", "type": "uint256"},
        ],
        "name": "getProductHistory",
        "outputs": [
            {
                "components": [
                    {"internalType": "uint256", "name": "timestamp", "type": "uint256"},
                    {"internalType": "string", "name": "status", "type": "string"},
                    {"internalType": "string", "name": "location", "type": "string"},
                    {"internalType": "string", "name": "sensorData", "type": "string"},
                ],
                "internalType": "struct ProductTracker.ProductUpdate[]",
                "name": "",
                "type": "tuple[]",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "uint256", "name": "", "type": "uint256"},
        ],
        "name": "products",
        "outputs": [
            {"internalType": "uint256", "name": "productId", "type": "uint256"},
            {"internalType": "string", "name": "productName", "type": "string"},
            {"internalType": "address", "name": "owner", "type": "address"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

# Optional zero-argument view returning the number of products.
PRODUCT_COUNT_FUNCTION = "productCount"


def load_abi(path: Optional[Path] = None) -> list[dict[str, Any]]:
    """
    Load the contract ABI.

    Accepts either a bare ABI list or a compiled artifact
    (Hardhat/Foundry style) with an "abi" key. Falls back to the
    built-in ABI when no path is given.
    """
    if path is None:
        return PRODUCT_TRACKER_ABI

    with open(path) as f:
        artifact = json.load(f)

    if isinstance(artifact, dict):
        artifact = artifact.get("abi")
    if not isinstance(artifact, list):
        raise ValueError(f"No ABI found in {path}")
    return artifact


def has_view_function(abi: list[dict[str, Any]], name: str, arity: int = 0) -> bool:
    """Check whether the ABI declares a view function with the given name and arity."""
    for entry in abi:
        if (
            entry.get("type") == "function"
            and entry.get("name") == name
            and entry.get("stateMutability") in ("view", "pure")
            and len(entry.get("inputs", [])) == arity
        ):
            return True
    return False
