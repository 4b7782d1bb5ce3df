"""
Activity ledger accessor: append points_activities rows and run aggregate
queries (count, sum, existence) scoped by wallet and time window.

Rows are never updated after insert. A wallet is matched either on the EVM
column (user_wallet_address) or on a metadata key (solana_wallet,
stellar_wallet), since only EVM wallets have a dedicated column.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import func

from checkin_rewards.database.models import ActivityRecord, PointsActivity
from checkin_rewards.database.session import session_scope
from checkin_rewards.rewards_logging import get_logger

logger = get_logger(__name__)

EVM_WALLET_COLUMN = "user_wallet_address"


@dataclass(frozen=True)
class WalletFilter:
    """Which wallet a ledger query is scoped to."""

    field: str
    """user_wallet_address, or a metadata key such as solana_wallet."""
    value: str

    def clause(self):
        if self.field == EVM_WALLET_COLUMN:
            return PointsActivity.user_wallet_address == self.value
        return PointsActivity.activity_metadata[self.field].as_string() == self.value


def _scoped(query, wallet: WalletFilter, activity_type: str, start: datetime | None, end: datetime | None):
    query = query.filter(wallet.clause(), PointsActivity.activity_type == activity_type)
    if start is not None:
        query = query.filter(PointsActivity.created_at >= start)
    if end is not None:
        query = query.filter(PointsActivity.created_at < end)
    return query


def insert_activity(
    activity_type: str,
    points_earned: int,
    description: str,
    metadata: dict[str, Any],
    *,
    user_wallet_address: str | None = None,
    processed: bool = True,
    created_at: datetime | None = None,
) -> ActivityRecord:
    """Insert one ledger row and return it (with its id)."""
    if points_earned <= 0:
        raise ValueError("points_earned must be positive")
    with session_scope() as session:
        row = PointsActivity(
            activity_type=activity_type,
            points_earned=points_earned,
            description=description,
            activity_metadata=metadata,
            user_wallet_address=user_wallet_address,
            processed=processed,
        )
        if created_at is not None:
            row.created_at = created_at
        session.add(row)
        session.flush()
        return row.to_record()


def count_activities(
    wallet: WalletFilter,
    activity_type: str,
    start: datetime | None = None,
    end: datetime | None = None,
) -> int:
    with session_scope() as session:
        query = _scoped(session.query(func.count(PointsActivity.id)), wallet, activity_type, start, end)
        return int(query.scalar() or 0)


def sum_points(
    wallet: WalletFilter,
    activity_type: str,
    start: datetime | None = None,
    end: datetime | None = None,
) -> int:
    with session_scope() as session:
        query = _scoped(
            session.query(func.coalesce(func.sum(PointsActivity.points_earned), 0)),
            wallet,
            activity_type,
            start,
            end,
        )
        return int(query.scalar() or 0)


def has_checkpoint_activity(
    wallet: WalletFilter,
    activity_type: str,
    checkpoint: str,
    start: datetime | None = None,
    end: datetime | None = None,
) -> bool:
    """True if at least one matching row carries metadata.checkpoint == checkpoint."""
    with session_scope() as session:
        query = _scoped(session.query(PointsActivity.id), wallet, activity_type, start, end)
        query = query.filter(PointsActivity.activity_metadata["checkpoint"].as_string() == checkpoint)
        return query.limit(1).first() is not None


def list_activities(
    wallet: WalletFilter,
    activity_type: str,
    start: datetime | None = None,
    end: datetime | None = None,
    *,
    limit: int = 100,
) -> list[ActivityRecord]:
    """Matching rows, newest first."""
    with session_scope() as session:
        query = _scoped(session.query(PointsActivity), wallet, activity_type, start, end)
        rows = query.order_by(PointsActivity.id.desc()).limit(limit).all()
        return [r.to_record() for r in rows]
