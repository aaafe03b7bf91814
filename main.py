"""
Main entrypoint: Token Distributor scheduler in the foreground.

Env: PRIVATE_KEY, RPC_URL (or ALCHEMY_RPC_URL), CONTRACT_ADDRESS, DISTRIBUTION_SCHEDULE, etc.
See token_distributor.config.env for the full list. `python main.py --run-now` runs one attempt.
"""

import sys

from token_distributor.runner import main

if __name__ == "__main__":
    sys.exit(main())
