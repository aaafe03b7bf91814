"""Contract ABI for the distribution call: a single zero-argument, non-payable function."""

from __future__ import annotations

from typing import Any


def zero_arg_function_abi(function_name: str) -> list[dict[str, Any]]:
    """Minimal ABI: only the function the distributor calls."""
    return [
        {
            "inputs": [],
            "name": function_name,
            "outputs": [],
            "stateMutability": "nonpayable",
            "type": "function",
        }
    ]
