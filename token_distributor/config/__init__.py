"""
Configuration management for Token Distributor.

Loads and validates settings from environment variables and an optional .env
file. load_config() is the single source of truth; it is called once at startup.
"""

from token_distributor.config.settings import DistributorConfig, load_config  # noqa: F401

__all__ = ["DistributorConfig", "load_config"]
