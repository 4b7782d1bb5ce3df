"""
Check-in routes: unified POST /checkin, per-chain POST /solana-checkin and
POST /stellar-checkin, and GET /checkin-status.

Every variant resolves the player for its chain and hands off to
process_checkin. A daily limit hit returns 429 and store failures return 500.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from checkin_rewards.api_server.responses import api_error, api_success, api_validation_error
from checkin_rewards.api_server.schemas import (
    LegacyCheckinRequest,
    SolanaCheckinRequest,
    StellarCheckinRequest,
    UnifiedCheckinRequest,
)
from checkin_rewards.checkin.handler import CheckinInput, CheckinResult, CheckinSuccess, process_checkin
from checkin_rewards.checkin.status import get_checkin_status
from checkin_rewards.core.exceptions import extract_error_message
from checkin_rewards.database import players
from checkin_rewards.database.models import PlayerRecord
from checkin_rewards.rewards_logging import get_logger
from checkin_rewards.utils.wallet_utils import short_wallet

logger = get_logger(__name__)

router = APIRouter(tags=["checkin"])


def _blank_to_none(value: str | None) -> str | None:
    return (value or "").strip() or None


def _resolve_player(chain: str, wallet: str, email: str | None, stellar_wallet_id: str | None = None) -> PlayerRecord:
    if chain == "evm":
        return players.create_or_update_player(wallet, email=email)
    if chain == "solana":
        return players.create_or_update_player_for_solana(wallet, email)
    return players.create_or_update_player_for_stellar(wallet, email, stellar_wallet_id)


def _checkin_response(result: CheckinResult) -> JSONResponse:
    if not isinstance(result, CheckinSuccess):
        return api_error(result.error, 429)
    return api_success(result.to_data(), result.message)


def _run_checkin(
    chain: str,
    wallet: str,
    checkpoint: str,
    email: str | None,
    *,
    stellar_wallet_id: str | None = None,
) -> JSONResponse:
    try:
        player = _resolve_player(chain, wallet, email, stellar_wallet_id)
        result = process_checkin(
            CheckinInput(
                player=player,
                checkpoint=checkpoint,
                chain=chain,
                chain_wallet_address=wallet,
                email=email,
            )
        )
        return _checkin_response(result)
    except Exception as e:
        logger.exception("checkin_failed", chain=chain, wallet=short_wallet(wallet), checkpoint=checkpoint, error=str(e))
        return api_error(extract_error_message(e), 500)


@router.post("/checkin")
def checkin(body: dict[str, Any] = Body(...)) -> JSONResponse:
    """
    Unified check-in. With "chain" the wallet must match that chain's format;
    without it the legacy EVM body is expected.
    """
    if body.get("chain") is not None:
        try:
            req = UnifiedCheckinRequest.model_validate(body)
        except ValidationError as e:
            return api_validation_error(e.errors())
        chain, wallet, email, checkpoint = req.chain, req.walletAddress, req.email, req.checkpoint
    else:
        try:
            legacy = LegacyCheckinRequest.model_validate(body)
        except ValidationError as e:
            return api_validation_error(e.errors())
        chain, wallet, email, checkpoint = "evm", legacy.walletAddress, legacy.email, legacy.checkpoint

    return _run_checkin(chain, wallet, checkpoint, _blank_to_none(email))


@router.post("/solana-checkin")
def solana_checkin(body: SolanaCheckinRequest) -> JSONResponse:
    wallet = _blank_to_none(body.solanaWalletAddress)
    checkpoint = _blank_to_none(body.checkpoint)
    if not wallet or not checkpoint:
        return api_error("Solana wallet address and checkpoint are required", 400)
    return _run_checkin("solana", wallet, checkpoint, _blank_to_none(body.email))


@router.post("/stellar-checkin")
def stellar_checkin(body: StellarCheckinRequest) -> JSONResponse:
    wallet = _blank_to_none(body.stellarWalletAddress)
    checkpoint = _blank_to_none(body.checkpoint)
    if not wallet or not checkpoint:
        return api_error("Stellar wallet address and checkpoint are required", 400)
    return _run_checkin(
        "stellar",
        wallet,
        checkpoint,
        _blank_to_none(body.email),
        stellar_wallet_id=_blank_to_none(body.stellarWalletId),
    )


@router.get("/checkin-status")
def checkin_status(address: str | None = None, checkpoint: str | None = None) -> JSONResponse:
    if not address:
        return api_error("Address parameter is required", 400)
    if not checkpoint:
        return api_error("Checkpoint parameter is required", 400)
    try:
        return api_success(get_checkin_status(address, checkpoint))
    except Exception as e:
        logger.exception("checkin_status_failed", wallet=short_wallet(address), error=str(e))
        return api_error("Failed to check check-in status", 500)
