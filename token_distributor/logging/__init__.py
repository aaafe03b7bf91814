"""
Structured logging for Token Distributor.

JSON logs with timestamp, event_type, and per-tick context (estimated_gas, tx_hash).
Use get_logger() in all modules for aggregation-friendly output.
"""

from token_distributor.logging.logger import configure_structlog, get_logger

__all__ = ["configure_structlog", "get_logger"]
