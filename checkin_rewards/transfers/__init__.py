"""
Reward token transfers: the per-address concurrency guard and the transfer operation.
"""

from checkin_rewards.transfers.guard import TransferGuard
from checkin_rewards.transfers.service import TransferOutcome, get_token_info, perform_transfer

__all__ = ["TransferGuard", "TransferOutcome", "get_token_info", "perform_transfer"]
