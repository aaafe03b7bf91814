"""
Core cross-cutting pieces shared by config, scheduler, submitter and runner.
"""

from token_distributor.core.exceptions import ConfigError, DistributorError

__all__ = ["ConfigError", "DistributorError"]
