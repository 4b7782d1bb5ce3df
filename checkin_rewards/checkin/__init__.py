"""
Checkpoint check-in flow: chain adapters, the shared handler and status queries.
"""

from checkin_rewards.checkin.chains import CHAINS, ChainAdapter, get_chain_adapter
from checkin_rewards.checkin.handler import (
    CheckinInput,
    CheckinRateLimited,
    CheckinResult,
    CheckinSuccess,
    process_checkin,
)

__all__ = [
    "CHAINS",
    "ChainAdapter",
    "CheckinInput",
    "CheckinRateLimited",
    "CheckinResult",
    "CheckinSuccess",
    "get_chain_adapter",
    "process_checkin",
]
