"""
Environment variable loading for Token Distributor.

- PRIVATE_KEY: signer private key (hex)
- RPC_URL: node endpoint (ALCHEMY_RPC_URL accepted as fallback)
- CONTRACT_ADDRESS: distribution contract address
- CONTRACT_FUNCTION: zero-argument function to call (default: distributeDailyTokens)
- DISTRIBUTION_SCHEDULE / SCHEDULE_TIMEZONE: cron cadence (default: 09:30 UTC daily)
- CHAIN_ID: optional; resolved from the node when unset
- EXPECTED_REJECTION_MARKERS: comma-separated substrings treated as expected rejections
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

# Project root: config is token_distributor/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_CONTRACT_FUNCTION = "distributeDailyTokens"
DEFAULT_SCHEDULE = "30 9 * * *"
DEFAULT_SCHEDULE_TIMEZONE = "UTC"
DEFAULT_EXPECTED_REJECTION_MARKERS = ("Too early for next mint",)


def load_distributor_env(path: Path | None = None) -> None:
    """Load .env from project root. Existing env vars win. Safe to call multiple times."""
    load_dotenv(path or _ENV_PATH, override=False)


def _get(name: str) -> str:
    return (os.getenv(name) or "").strip()


def get_private_key() -> str:
    return _get("PRIVATE_KEY")


def get_rpc_url() -> str:
    """
    Resolve RPC URL from env.
    Order: RPC_URL > ALCHEMY_RPC_URL.
    """
    return _get("RPC_URL") or _get("ALCHEMY_RPC_URL")


def get_contract_address() -> str:
    return _get("CONTRACT_ADDRESS")


def get_contract_function() -> str:
    return _get("CONTRACT_FUNCTION") or DEFAULT_CONTRACT_FUNCTION


def get_schedule() -> str:
    return _get("DISTRIBUTION_SCHEDULE") or DEFAULT_SCHEDULE


def get_schedule_timezone() -> str:
    return _get("SCHEDULE_TIMEZONE") or DEFAULT_SCHEDULE_TIMEZONE


def get_chain_id_raw() -> str:
    return _get("CHAIN_ID")


def get_expected_rejection_markers() -> tuple[str, ...]:
    """Comma-separated EXPECTED_REJECTION_MARKERS; default is the "too early" mint guard."""
    raw = _get("EXPECTED_REJECTION_MARKERS")
    if not raw:
        return DEFAULT_EXPECTED_REJECTION_MARKERS
    markers = tuple(m.strip() for m in raw.split(",") if m.strip())
    return markers or DEFAULT_EXPECTED_REJECTION_MARKERS


def mask_rpc_url(url: str) -> str:
    """Hide credentials embedded in RPC URLs (user:pass@, path segment, api-key query)."""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return url
    host = parsed.netloc.rsplit("@", 1)[-1]
    netloc = f"***@{host}" if "@" in parsed.netloc else host
    if "api-key=" in parsed.query:
        return f"{parsed.scheme}://{netloc}{parsed.path}?api-key=***"
    if parsed.path.strip("/"):
        return f"{parsed.scheme}://{netloc}/***"
    return f"{parsed.scheme}://{netloc}{parsed.path}"
