"""
Checkpoint check-in handler, shared by every chain.

Enforces the daily per-wallet checkpoint limit, appends one ledger row,
bumps the player's running total and recomputes today's points.

The count (limit check) and the insert are separate statements with no
transaction around them, so concurrent requests for one wallet can both pass
the check and exceed the limit by a small margin.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from checkin_rewards.checkin.chains import ChainAdapter, get_chain_adapter
from checkin_rewards.config.constants import (
    ACTIVITY_TYPE_CHECKPOINT,
    DAILY_CHECKIN_POINTS,
    DAILY_CHECKPOINT_LIMIT,
)
from checkin_rewards.database import activities, players
from checkin_rewards.database.models import PlayerRecord
from checkin_rewards.rewards_logging import bind_checkin
from checkin_rewards.utils.dates import utc_day_bounds


@dataclass
class CheckinInput:
    player: PlayerRecord
    """Player record, already created or updated for this chain."""
    checkpoint: str
    chain: str
    chain_wallet_address: str
    """Wallet used to scope the daily limit (EVM column or metadata key)."""
    email: str | None = None


@dataclass
class CheckinSuccess:
    player: PlayerRecord
    points_awarded: int
    points_earned_today: int
    daily_reward_claimed: bool
    checkpoint_activity_id: int | None
    message: str
    success: bool = True

    def to_data(self) -> dict[str, Any]:
        return {
            "player": self.player.to_dict(),
            "pointsAwarded": self.points_awarded,
            "pointsEarnedToday": self.points_earned_today,
            "dailyRewardClaimed": self.daily_reward_claimed,
            "checkpointActivityId": self.checkpoint_activity_id,
        }


@dataclass
class CheckinRateLimited:
    error: str
    success: bool = False
    rate_limited: bool = True


CheckinResult = CheckinSuccess | CheckinRateLimited


def _refresh_player(adapter: ChainAdapter, player: PlayerRecord, points: int) -> PlayerRecord:
    if player.id is not None:
        return players.update_player_points(player.id, points)
    if adapter.chain == "evm" and player.wallet_address:
        profile = players.get_player_profile(player.wallet_address)
        if profile is not None:
            return profile
    return player


def process_checkin(
    data: CheckinInput,
    *,
    points: int = DAILY_CHECKIN_POINTS,
    daily_limit: int = DAILY_CHECKPOINT_LIMIT,
) -> CheckinResult:
    """
    Process one checkpoint visit.

    Returns CheckinRateLimited when the wallet already has daily_limit
    check-ins today (nothing is written). Store errors propagate.
    """
    adapter = get_chain_adapter(data.chain)
    window = utc_day_bounds()
    wallet = adapter.wallet_filter(data.chain_wallet_address)
    log = bind_checkin(adapter.chain, data.chain_wallet_address, data.checkpoint)

    checkins_today = activities.count_activities(wallet, ACTIVITY_TYPE_CHECKPOINT, window.start, window.end)
    if checkins_today >= daily_limit:
        log.info("checkin_daily_limit_reached", count=checkins_today, limit=daily_limit)
        return CheckinRateLimited(
            error=f"Daily checkpoint limit of {daily_limit} reached. Come back tomorrow!",
        )

    description = f"{adapter.display_name}Checkpoint visit: {data.checkpoint}"
    activity = activities.insert_activity(
        ACTIVITY_TYPE_CHECKPOINT,
        points,
        description,
        adapter.build_metadata(data.checkpoint, data.email, data.chain_wallet_address, data.player),
        # Column only accepts EVM addresses
        user_wallet_address=data.player.wallet_address or None,
        processed=True,
    )

    latest = _refresh_player(adapter, data.player, points)

    points_today = activities.sum_points(wallet, ACTIVITY_TYPE_CHECKPOINT, window.start, window.end)
    response_player = replace(latest, total_points=latest.total_points or 0)

    log.info(
        "checkin_recorded",
        player_id=data.player.id,
        activity_id=activity.id,
        points=points,
        points_today=points_today,
    )
    return CheckinSuccess(
        player=response_player,
        points_awarded=points,
        points_earned_today=points_today,
        daily_reward_claimed=points_today > 0,
        checkpoint_activity_id=activity.id,
        message=f"Nice! You earned {points} points for this {adapter.display_name}checkpoint.",
    )
