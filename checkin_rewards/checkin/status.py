"""Check-in status for an EVM wallet at one checkpoint."""

from __future__ import annotations

from typing import Any

from checkin_rewards.checkin.chains import EVM
from checkin_rewards.config.constants import ACTIVITY_TYPE_CHECKPOINT
from checkin_rewards.database import activities
from checkin_rewards.utils.dates import utc_day_bounds


def get_checkin_status(address: str, checkpoint: str) -> dict[str, Any]:
    """
    Return hasCheckedIn (ever, at this checkpoint), checkpointCheckinToday,
    dailyRewardClaimed and pointsEarnedToday (all checkpoints today).
    """
    window = utc_day_bounds()
    wallet = EVM.wallet_filter(address)

    points_today = activities.sum_points(wallet, ACTIVITY_TYPE_CHECKPOINT, window.start, window.end)
    checkpoint_today = activities.has_checkpoint_activity(
        wallet, ACTIVITY_TYPE_CHECKPOINT, checkpoint, window.start, window.end
    )
    has_checked_in = activities.has_checkpoint_activity(wallet, ACTIVITY_TYPE_CHECKPOINT, checkpoint)

    return {
        "hasCheckedIn": has_checked_in,
        "checkpointCheckinToday": checkpoint_today,
        "dailyRewardClaimed": points_today > 0,
        "pointsEarnedToday": points_today,
    }
