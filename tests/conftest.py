"""
Pytest fixtures for Token Distributor tests. Network is always mocked; env is isolated per test.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from token_distributor.config import DistributorConfig

# Well-known throwaway dev key (never funded on a real network)
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TEST_RPC_URL = "https://polygon-amoy.g.alchemy.com/v2/secret-key"

_ENV_VARS = (
    "PRIVATE_KEY",
    "RPC_URL",
    "ALCHEMY_RPC_URL",
    "CONTRACT_ADDRESS",
    "CONTRACT_FUNCTION",
    "DISTRIBUTION_SCHEDULE",
    "SCHEDULE_TIMEZONE",
    "CHAIN_ID",
    "EXPECTED_REJECTION_MARKERS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Clear distributor env vars and skip the project .env file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    import token_distributor.config.env as env

    monkeypatch.setattr(env, "load_distributor_env", lambda path=None: None)


@pytest.fixture
def required_env(monkeypatch):
    """Minimal valid environment."""
    monkeypatch.setenv("PRIVATE_KEY", TEST_PRIVATE_KEY)
    monkeypatch.setenv("RPC_URL", TEST_RPC_URL)
    monkeypatch.setenv("CONTRACT_ADDRESS", TEST_CONTRACT_ADDRESS)


@pytest.fixture
def config() -> DistributorConfig:
    return DistributorConfig(
        private_key=TEST_PRIVATE_KEY,
        rpc_url=TEST_RPC_URL,
        contract_address=TEST_CONTRACT_ADDRESS,
        chain_id=80002,
    )


@pytest.fixture
def mock_client():
    """Chain client whose every step succeeds."""
    client = MagicMock()
    client.address = "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1"
    client.estimate_gas.return_value = 51234
    client.build_transaction.return_value = {
        "to": TEST_CONTRACT_ADDRESS,
        "data": "0x1a2b3c4d",
        "gas": 51234,
        "nonce": 7,
        "chainId": 80002,
    }
    client.sign.return_value = MagicMock(raw_transaction=b"\x02\xf8")
    client.send_raw.return_value = "0x" + "ab" * 32
    return client
