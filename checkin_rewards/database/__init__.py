"""
Database layer: players and the points activity ledger.

SQLAlchemy backed; SQLite for local use and tests, PostgreSQL via DATABASE_URL.
"""

from checkin_rewards.database.models import (
    ActivityRecord,
    Player,
    PlayerRecord,
    PointsActivity,
)
from checkin_rewards.database.session import init_db, reset_engine_for_test, session_scope

__all__ = [
    "ActivityRecord",
    "Player",
    "PlayerRecord",
    "PointsActivity",
    "init_db",
    "reset_engine_for_test",
    "session_scope",
]
