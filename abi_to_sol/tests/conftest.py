from __future__ import annotations

from typing import Any, Dict, List

import pytest

from abi_to_sol.config import load_config


def _param(name: str, type_: str, **extra: Any) -> Dict[str, Any]:
    return {"name": name, "type": type_, **extra}


def _point(internal_type: str = "struct Point", name: str = "p") -> Dict[str, Any]:
    return _param(
        name,
        "tuple",
        internalType=internal_type,
        components=[_param("x", "uint256"), _param("y", "uint256")],
    )


@pytest.fixture
def clean_config(monkeypatch):
    """Strip ABI_TO_SOL_* from the environment and rebuild the cached config."""
    for key in (
        "ABI_TO_SOL_NAME",
        "ABI_TO_SOL_SOLIDITY_VERSION",
        "ABI_TO_SOL_LICENSE",
        "ABI_TO_SOL_PRETTIFY",
        "ABI_TO_SOL_PRETTIER",
    ):
        monkeypatch.delenv(key, raising=False)
    load_config.cache_clear()
    yield monkeypatch
    load_config.cache_clear()


@pytest.fixture
def simple_abi() -> List[Dict[str, Any]]:
    return [
        {
            "type": "function",
            "name": "foo",
            "inputs": [_param("", "uint256")],
            "outputs": [],
            "stateMutability": "nonpayable",
        }
    ]


@pytest.fixture
def token_abi() -> List[Dict[str, Any]]:
    return [
        {"type": "constructor", "inputs": [_param("supply", "uint256")], "stateMutability": "nonpayable"},
        {
            "type": "function",
            "name": "balanceOf",
            "inputs": [_param("owner", "address")],
            "outputs": [_param("", "uint256")],
            "stateMutability": "view",
        },
        {
            "type": "function",
            "name": "transfer",
            "inputs": [_param("to", "address"), _param("amount", "uint256")],
            "outputs": [_param("", "bool")],
            "stateMutability": "nonpayable",
        },
        {
            "type": "event",
            "name": "Transfer",
            "inputs": [
                _param("from", "address", indexed=True),
                _param("to", "address", indexed=True),
                _param("value", "uint256", indexed=False),
            ],
            "anonymous": False,
        },
    ]


@pytest.fixture
def point_abi() -> List[Dict[str, Any]]:
    """Two functions taking the same tuple shape under different struct names."""
    return [
        {
            "type": "function",
            "name": "move",
            "inputs": [_point("struct Point", "p")],
            "outputs": [],
            "stateMutability": "nonpayable",
        },
        {
            "type": "function",
            "name": "scale",
            "inputs": [_point("struct Vector", "v")],
            "outputs": [],
            "stateMutability": "nonpayable",
        },
    ]
