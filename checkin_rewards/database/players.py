"""
Player store accessor: create-or-update by wallet (per chain) and/or email,
and additive point increments on the running total.

A player created from one chain is linked to another chain's wallet when the
same email arrives with the new wallet.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import update
from sqlalchemy.orm import Session

from checkin_rewards.database.models import Player, PlayerRecord
from checkin_rewards.database.session import session_scope
from checkin_rewards.rewards_logging import get_logger
from checkin_rewards.utils.wallet_utils import short_wallet

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _first_by(session: Session, column, value: str) -> Player | None:
    return session.query(Player).filter(column == value).order_by(Player.id).first()


def _clean(value: str | None) -> str | None:
    return (value or "").strip() or None


# -----------------------------------------------------------------------------
# Lookups
# -----------------------------------------------------------------------------


def get_player_by_id(player_id: int) -> PlayerRecord | None:
    with session_scope() as session:
        row = session.get(Player, player_id)
        return row.to_record() if row else None


def get_player_by_wallet(wallet_address: str) -> PlayerRecord | None:
    """Player by EVM wallet address, or None."""
    with session_scope() as session:
        row = _first_by(session, Player.wallet_address, wallet_address)
        return row.to_record() if row else None


def get_player_by_solana_wallet(solana_wallet_address: str) -> PlayerRecord | None:
    with session_scope() as session:
        row = _first_by(session, Player.solana_wallet_address, solana_wallet_address)
        return row.to_record() if row else None


def get_player_by_stellar_wallet(stellar_wallet_address: str) -> PlayerRecord | None:
    with session_scope() as session:
        row = _first_by(session, Player.stellar_wallet_address, stellar_wallet_address)
        return row.to_record() if row else None


def get_player_by_email(email: str) -> PlayerRecord | None:
    with session_scope() as session:
        row = _first_by(session, Player.email, email)
        return row.to_record() if row else None


def get_player_profile(wallet_address: str) -> PlayerRecord | None:
    """Re-read an EVM player's profile; used when a player record lacks an id."""
    return get_player_by_wallet(wallet_address)


# -----------------------------------------------------------------------------
# Create or update
# -----------------------------------------------------------------------------


def create_or_update_player(
    wallet_address: str,
    email: str | None = None,
    username: str | None = None,
) -> PlayerRecord:
    """
    Create or update a player by EVM wallet address.
    An existing player keeps its email/username unless new values are given.
    """
    email = _clean(email)
    username = _clean(username)
    with session_scope() as session:
        row = _first_by(session, Player.wallet_address, wallet_address)
        if row is not None:
            row.email = email or row.email
            row.username = username or row.username
            row.updated_at = _now()
            session.flush()
            return row.to_record()
        row = Player(
            wallet_address=wallet_address,
            email=email,
            username=username,
            total_points=0,
        )
        session.add(row)
        session.flush()
        logger.info("player_created", chain="evm", wallet=short_wallet(wallet_address), player_id=row.id)
        return row.to_record()


def create_or_update_player_for_solana(
    solana_wallet_address: str,
    email: str | None = None,
) -> PlayerRecord:
    """
    Create or update a player for Solana check-ins.
    Links by email if a player already exists from another chain.
    """
    email = _clean(email)
    with session_scope() as session:
        row = _first_by(session, Player.solana_wallet_address, solana_wallet_address)
        if row is not None:
            if email and not row.email:
                row.email = email
                row.updated_at = _now()
                session.flush()
            return row.to_record()

        if email:
            row = _first_by(session, Player.email, email)
            if row is not None:
                row.solana_wallet_address = solana_wallet_address
                row.updated_at = _now()
                session.flush()
                logger.info("player_linked", chain="solana", wallet=short_wallet(solana_wallet_address), player_id=row.id)
                return row.to_record()

        # wallet_address stays null: that column only holds EVM addresses
        row = Player(solana_wallet_address=solana_wallet_address, email=email, total_points=0)
        session.add(row)
        session.flush()
        logger.info("player_created", chain="solana", wallet=short_wallet(solana_wallet_address), player_id=row.id)
        return row.to_record()


def create_or_update_player_for_stellar(
    stellar_wallet_address: str,
    email: str | None = None,
    stellar_wallet_id: str | None = None,
) -> PlayerRecord:
    """
    Create or update a player for Stellar check-ins.
    Links by email if a player already exists from EVM or Solana check-ins.
    """
    email = _clean(email)
    stellar_wallet_id = _clean(stellar_wallet_id)
    with session_scope() as session:
        row = _first_by(session, Player.stellar_wallet_address, stellar_wallet_address)
        if row is not None:
            changed = False
            if email and not row.email:
                row.email = email
                changed = True
            if stellar_wallet_id and not row.stellar_wallet_id:
                row.stellar_wallet_id = stellar_wallet_id
                changed = True
            if changed:
                row.updated_at = _now()
                session.flush()
            return row.to_record()

        if email:
            row = _first_by(session, Player.email, email)
            if row is not None:
                row.stellar_wallet_address = stellar_wallet_address
                if stellar_wallet_id:
                    row.stellar_wallet_id = stellar_wallet_id
                row.updated_at = _now()
                session.flush()
                logger.info("player_linked", chain="stellar", wallet=short_wallet(stellar_wallet_address), player_id=row.id)
                return row.to_record()

        row = Player(
            stellar_wallet_address=stellar_wallet_address,
            stellar_wallet_id=stellar_wallet_id,
            email=email,
            total_points=0,
        )
        session.add(row)
        session.flush()
        logger.info("player_created", chain="stellar", wallet=short_wallet(stellar_wallet_address), player_id=row.id)
        return row.to_record()


# -----------------------------------------------------------------------------
# Points
# -----------------------------------------------------------------------------


def update_player_points(player_id: int, points_to_add: int) -> PlayerRecord:
    """
    Add points_to_add to the player's running total and return the updated player.
    Raises LookupError if the player does not exist.
    """
    with session_scope() as session:
        result = session.execute(
            update(Player)
            .where(Player.id == player_id)
            .values(total_points=Player.total_points + points_to_add, updated_at=_now())
        )
        if result.rowcount == 0:
            raise LookupError(f"Player {player_id} not found")
        row = session.get(Player, player_id, populate_existing=True)
        logger.debug("player_points_updated", player_id=player_id, added=points_to_add, total=row.total_points)
        return row.to_record()
