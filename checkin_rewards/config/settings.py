"""
Application settings.

Snapshot of environment configuration and check-in constants as a frozen
dataclass. get_settings() re-reads the environment on every call so tests
can monkeypatch env vars.
"""

from __future__ import annotations

from dataclasses import dataclass

from checkin_rewards.config import constants
from checkin_rewards.config.env import (
    get_base_rpc_url,
    get_checkin_contract_address,
    get_checkin_rpc_url,
    get_database_url,
    get_reward1155_address,
    get_server_private_key,
)


@dataclass(frozen=True)
class Settings:
    database_url: str
    checkin_rpc_url: str
    checkin_contract_address: str
    base_rpc_url: str | None
    reward1155_address: str
    server_private_key: str | None
    daily_checkin_points: int = constants.DAILY_CHECKIN_POINTS
    daily_checkpoint_limit: int = constants.DAILY_CHECKPOINT_LIMIT
    event_cache_ttl_sec: float = constants.EVENT_CACHE_TTL_SEC

    def __repr__(self) -> str:
        key = "***" if self.server_private_key else None
        return (
            f"Settings(database_url={self.database_url!r}, checkin_rpc_url={self.checkin_rpc_url!r}, "
            f"checkin_contract_address={self.checkin_contract_address!r}, base_rpc_url={self.base_rpc_url!r}, "
            f"reward1155_address={self.reward1155_address!r}, server_private_key={key!r})"
        )


def get_settings() -> Settings:
    """Return the current application settings."""
    return Settings(
        database_url=get_database_url(),
        checkin_rpc_url=get_checkin_rpc_url(),
        checkin_contract_address=get_checkin_contract_address(),
        base_rpc_url=get_base_rpc_url(),
        reward1155_address=get_reward1155_address(),
        server_private_key=get_server_private_key(),
    )
