"""
Application settings: validated, immutable configuration for one process.

Responsibilities:
- Read raw values via config.env (environment + .env file).
- Fail closed: collect every missing/invalid required value into one ConfigError.
- Expose a frozen DistributorConfig passed explicitly to the client and submitter.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

from token_distributor.config import env
from token_distributor.core.exceptions import ConfigError

_PRIVATE_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_FUNCTION_NAME_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_RPC_SCHEMES = frozenset({"http", "https", "ws", "wss"})


@dataclass(frozen=True)
class DistributorConfig:
    """Immutable settings loaded once at startup."""

    private_key: str
    rpc_url: str
    contract_address: str
    function_name: str = env.DEFAULT_CONTRACT_FUNCTION
    schedule: str = env.DEFAULT_SCHEDULE
    schedule_timezone: str = env.DEFAULT_SCHEDULE_TIMEZONE
    chain_id: int | None = None
    expected_rejection_markers: tuple[str, ...] = env.DEFAULT_EXPECTED_REJECTION_MARKERS

    def __repr__(self) -> str:
        # Never render the key.
        return (
            f"DistributorConfig(rpc_url={env.mask_rpc_url(self.rpc_url)!r}, "
            f"contract_address={self.contract_address!r}, function_name={self.function_name!r}, "
            f"schedule={self.schedule!r}, schedule_timezone={self.schedule_timezone!r}, "
            f"chain_id={self.chain_id!r})"
        )


def _validate(config: DistributorConfig) -> list[tuple[str, str]]:
    """Return (variable, message) for every invalid value."""
    problems: list[tuple[str, str]] = []
    if not _PRIVATE_KEY_RE.match(config.private_key):
        problems.append(("PRIVATE_KEY", "PRIVATE_KEY must be 32 bytes of hex (64 chars, optional 0x prefix)"))
    parsed = urlparse(config.rpc_url)
    if parsed.scheme.lower() not in _RPC_SCHEMES or not parsed.netloc:
        problems.append(("RPC_URL", "RPC_URL must be an http(s) or ws(s) URL"))
    if not _ADDRESS_RE.match(config.contract_address):
        problems.append(("CONTRACT_ADDRESS", "CONTRACT_ADDRESS must be a 0x-prefixed 20-byte hex address"))
    if not _FUNCTION_NAME_RE.match(config.function_name):
        problems.append(("CONTRACT_FUNCTION", "CONTRACT_FUNCTION must be a plain function name"))
    if config.chain_id is not None and config.chain_id <= 0:
        problems.append(("CHAIN_ID", "CHAIN_ID must be a positive integer"))
    if not config.expected_rejection_markers:
        problems.append(("EXPECTED_REJECTION_MARKERS", "EXPECTED_REJECTION_MARKERS must contain at least one marker"))
    return problems


def load_config(*, load_dotenv_file: bool = True) -> DistributorConfig:
    """
    Build DistributorConfig from the environment.

    Raises ConfigError listing every missing required variable, or every
    invalid value, so the process aborts before scheduling begins.
    """
    if load_dotenv_file:
        env.load_distributor_env()

    required = {
        "PRIVATE_KEY": env.get_private_key(),
        "RPC_URL": env.get_rpc_url(),
        "CONTRACT_ADDRESS": env.get_contract_address(),
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigError(
            "Missing required environment variable(s): " + ", ".join(missing),
            variables=missing,
        )

    chain_id_raw = env.get_chain_id_raw()
    chain_id: int | None = None
    if chain_id_raw:
        try:
            chain_id = int(chain_id_raw, 0)
        except ValueError as e:
            raise ConfigError(f"CHAIN_ID is not an integer: {chain_id_raw!r}", variables=["CHAIN_ID"]) from e

    config = DistributorConfig(
        private_key=required["PRIVATE_KEY"],
        rpc_url=required["RPC_URL"],
        contract_address=required["CONTRACT_ADDRESS"],
        function_name=env.get_contract_function(),
        schedule=env.get_schedule(),
        schedule_timezone=env.get_schedule_timezone(),
        chain_id=chain_id,
        expected_rejection_markers=env.get_expected_rejection_markers(),
    )
    problems = _validate(config)
    if problems:
        raise ConfigError(
            "Invalid configuration: " + "; ".join(message for _, message in problems),
            variables=[name for name, _ in problems],
        )
    return config
