"""
EVM chain access: JSON-RPC client, CheckIn event decoding and cache, reward token reads.
"""

from checkin_rewards.chain.events import CheckInEvent, EventCache, EventCacheStatus
from checkin_rewards.chain.rpc import EvmRpcClient

__all__ = ["CheckInEvent", "EventCache", "EventCacheStatus", "EvmRpcClient"]
