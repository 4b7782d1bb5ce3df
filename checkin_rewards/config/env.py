"""
Environment variable loading for Checkin Rewards.

- CHECKIN_DB_URL / DATABASE_URL: SQLAlchemy URL (PostgreSQL in production)
- CHECKIN_DB_PATH: SQLite file used when no URL is set (default: checkin_rewards.db)
- CHECKIN_RPC_URL: RPC endpoint of the chain holding the check-in contract
- CHECKIN_CONTRACT_ADDRESS: check-in contract emitting CheckIn events
- BASE_RPC_URL: Base RPC endpoint used for reward token reads
- REWARD1155_ADDRESS: reward contract exposing rewardToken()
- SERVER_PRIVATE_KEY: server signer (presence is checked, never logged)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is checkin_rewards/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SQLITE_PATH = "checkin_rewards.db"

# IRL testnet (chain id 63821), where the check-in contract lives
DEFAULT_CHECKIN_RPC_URL = "https://smartrpc.testnet.irl.syndicate.io"
DEFAULT_CHECKIN_CONTRACT_ADDRESS = "0x579F247094842cBB88C43a2568cD25c905092179"

# Reward1155 on Base; rewardToken() points at the ERC-20 being transferred
DEFAULT_REWARD1155_ADDRESS = "0xf2894fEd9CAa5E6422bF45D9fE1B38b06D9c46b8"


def load_rewards_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def _env(name: str) -> str:
    return (os.getenv(name) or "").strip()


def get_database_url() -> str:
    """Return CHECKIN_DB_URL or DATABASE_URL if set; else SQLite from CHECKIN_DB_PATH or default."""
    load_rewards_env()
    url = _env("CHECKIN_DB_URL") or _env("DATABASE_URL")
    if url:
        return url
    path = _env("CHECKIN_DB_PATH") or DEFAULT_SQLITE_PATH
    return f"sqlite:///{path}"


def get_checkin_rpc_url() -> str:
    load_rewards_env()
    return _env("CHECKIN_RPC_URL") or DEFAULT_CHECKIN_RPC_URL


def get_checkin_contract_address() -> str:
    load_rewards_env()
    return _env("CHECKIN_CONTRACT_ADDRESS") or DEFAULT_CHECKIN_CONTRACT_ADDRESS


def get_base_rpc_url() -> str | None:
    """Return BASE_RPC_URL, or None when unset (transfers report a configuration error)."""
    load_rewards_env()
    return _env("BASE_RPC_URL") or None


def get_reward1155_address() -> str:
    load_rewards_env()
    return _env("REWARD1155_ADDRESS") or DEFAULT_REWARD1155_ADDRESS


def get_server_private_key() -> str | None:
    load_rewards_env()
    return _env("SERVER_PRIVATE_KEY") or None


def mask_url(url: str) -> str:
    """Strip credentials and query string from a URL for log output."""
    return url.split("?")[0].split("@")[-1]
