"""
Domain models for database entities: players and the points activity ledger.

SQLAlchemy tables plus plain dataclass records. Accessors return records
(detached from the session) so callers never hold live ORM objects.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

from checkin_rewards.config.constants import MAX_VARCHAR_LENGTH

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# -----------------------------------------------------------------------------
# SQLAlchemy models
# -----------------------------------------------------------------------------


class Player(Base):
    """
    One participant, unified across chains by wallet address and/or email.
    """

    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wallet_address = Column(String(64), unique=True, nullable=True, index=True)  # EVM
    solana_wallet_address = Column(String(64), unique=True, nullable=True, index=True)
    stellar_wallet_address = Column(String(64), unique=True, nullable=True, index=True)
    stellar_wallet_id = Column(String(MAX_VARCHAR_LENGTH), nullable=True)
    email = Column(String(MAX_VARCHAR_LENGTH), nullable=True, index=True)
    username = Column(String(MAX_VARCHAR_LENGTH), nullable=True)
    total_points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, default=_utcnow)

    def to_record(self) -> PlayerRecord:
        return PlayerRecord(
            id=self.id,
            wallet_address=self.wallet_address,
            solana_wallet_address=self.solana_wallet_address,
            stellar_wallet_address=self.stellar_wallet_address,
            stellar_wallet_id=self.stellar_wallet_id,
            email=self.email,
            username=self.username,
            total_points=self.total_points or 0,
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )


class PointsActivity(Base):
    """
    Ledger row: one point-earning event. Append-only.

    user_wallet_address is the EVM wallet column; Solana and Stellar wallets
    live in metadata (solana_wallet / stellar_wallet).
    """

    __tablename__ = "points_activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_type = Column(String(64), nullable=False, index=True)
    points_earned = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    activity_metadata = Column("metadata", JSON, nullable=True)
    user_wallet_address = Column(String(64), nullable=True, index=True)
    processed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    def to_record(self) -> ActivityRecord:
        return ActivityRecord(
            id=self.id,
            activity_type=self.activity_type,
            points_earned=self.points_earned,
            description=self.description,
            metadata=dict(self.activity_metadata or {}),
            user_wallet_address=self.user_wallet_address,
            processed=bool(self.processed),
            created_at=_as_utc(self.created_at),
        )


# -----------------------------------------------------------------------------
# Records
# -----------------------------------------------------------------------------


@dataclass
class PlayerRecord:
    """Stored player as returned by the player accessor."""

    id: int | None
    wallet_address: str | None = None
    solana_wallet_address: str | None = None
    stellar_wallet_address: str | None = None
    stellar_wallet_id: str | None = None
    email: str | None = None
    username: str | None = None
    total_points: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        for key in ("created_at", "updated_at"):
            if out[key] is not None:
                out[key] = out[key].isoformat()
        return out


@dataclass
class ActivityRecord:
    """Single points_activities row."""

    id: int
    activity_type: str
    points_earned: int
    description: str | None
    metadata: dict[str, Any] = field(default_factory=dict)
    user_wallet_address: str | None = None
    processed: bool = False
    created_at: datetime | None = None
