"""
Token Distributor — scheduled caller for an on-chain daily distribution.

Once per cadence boundary the runner signs and submits a single zero-argument
contract call (distributeDailyTokens by default) and logs the classified
outcome. Modules: config (env loading), scheduler (cron cadence), submitter
(chain client, error classifier, attempt), runner (process entrypoint).
"""

__version__ = "0.1.0"
