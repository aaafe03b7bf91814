"""
Chain client: the only code that talks to the node.

Built once at startup from DistributorConfig and passed to TransactionSubmitter.
Wraps web3.py (HTTP or websocket provider, contract binding) and eth-account
(local signing). Submitters and tests depend only on the methods below, so a
MagicMock stands in for the network.
"""

from __future__ import annotations

from typing import Any

from eth_account import Account
from web3 import Web3

from token_distributor.config.env import mask_rpc_url
from token_distributor.config.settings import DistributorConfig
from token_distributor.logging import get_logger
from token_distributor.submitter.abi import zero_arg_function_abi

logger = get_logger(__name__)


def _make_provider(rpc_url: str) -> Any:
    if rpc_url.lower().startswith(("ws://", "wss://")):
        return Web3.LegacyWebSocketProvider(rpc_url)
    return Web3.HTTPProvider(rpc_url)


class ChainClient:
    """Signer account + contract binding for one zero-argument function."""

    def __init__(self, config: DistributorConfig, w3: Web3 | None = None) -> None:
        self._config = config
        self._w3 = w3 or Web3(_make_provider(config.rpc_url))
        self._account = Account.from_key(config.private_key)
        self._contract = self._w3.eth.contract(
            address=Web3.to_checksum_address(config.contract_address),
            abi=zero_arg_function_abi(config.function_name),
        )
        self._chain_id: int | None = config.chain_id
        logger.info(
            "chain_client_ready",
            rpc_url=mask_rpc_url(config.rpc_url),
            contract_address=self._contract.address,
            function_name=config.function_name,
            signer=self._account.address,
        )

    @property
    def address(self) -> str:
        return self._account.address

    def _function(self) -> Any:
        return self._contract.get_function_by_name(self._config.function_name)()

    def resolve_chain_id(self) -> int:
        """Configured CHAIN_ID, else eth_chainId from the node (cached)."""
        if self._chain_id is None:
            self._chain_id = int(self._w3.eth.chain_id)
        return self._chain_id

    def estimate_gas(self) -> int:
        return int(self._function().estimate_gas({"from": self.address}))

    def build_transaction(self, gas: int) -> dict[str, Any]:
        """Envelope to the contract: encoded call data, gas, pending nonce, chain id; fees filled by web3."""
        return dict(
            self._function().build_transaction(
                {
                    "from": self.address,
                    "gas": gas,
                    "nonce": self._w3.eth.get_transaction_count(self.address, "pending"),
                    "chainId": self.resolve_chain_id(),
                }
            )
        )

    def sign(self, tx: dict[str, Any]) -> Any:
        return self._account.sign_transaction(tx)

    def send_raw(self, signed: Any) -> str:
        tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)
