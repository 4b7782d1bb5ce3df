"""
Token transfer routes: POST /transfer-tokens (guarded per source address)
and GET /transfer-tokens (reward token info for a user).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from checkin_rewards.api_server.deps import get_client_factory, get_transfer_guard, settings_dep
from checkin_rewards.api_server.responses import api_error, api_success
from checkin_rewards.api_server.schemas import TransferTokensRequest
from checkin_rewards.config.settings import Settings
from checkin_rewards.core.exceptions import ConfigurationError, TransferInProgressError, extract_error_message
from checkin_rewards.rewards_logging import get_logger
from checkin_rewards.transfers.guard import TransferGuard
from checkin_rewards.transfers.service import ClientFactory, TransferOutcome, get_token_info, perform_transfer
from checkin_rewards.utils.wallet_utils import short_wallet

logger = get_logger(__name__)

router = APIRouter(tags=["transfers"])


def _parse_amount(raw: object) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


@router.post("/transfer-tokens")
async def transfer_tokens(
    body: TransferTokensRequest,
    guard: TransferGuard = Depends(get_transfer_guard),
    settings: Settings = Depends(settings_dep),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> JSONResponse:
    from_address = (body.fromAddress or "").strip()
    to_address = (body.toAddress or "").strip()
    if not from_address or not to_address or body.amount in (None, "", 0):
        return api_error("From address, to address, and amount are required", 400)
    if from_address.lower() == to_address.lower():
        return api_error("Cannot transfer to the same address", 400)
    amount = _parse_amount(body.amount)
    if amount is None:
        return api_error("Amount must be an integer", 400)
    if amount <= 0:
        return api_error("Amount must be greater than 0", 400)

    async def _transfer() -> TransferOutcome:
        try:
            return await perform_transfer(from_address, to_address, amount, settings, client_factory=client_factory)
        except Exception as e:
            logger.exception("transfer_failed", wallet=short_wallet(from_address), error=str(e))
            return TransferOutcome(500, extract_error_message(e) or "Failed to transfer tokens")

    try:
        outcome = await guard.run(from_address, _transfer)
    except TransferInProgressError as e:
        return api_error(str(e), 429)

    if not outcome.ok:
        return api_error(outcome.error or "Failed to transfer tokens", outcome.status_code)
    return api_success(outcome.data)


@router.get("/transfer-tokens")
async def token_info(
    userAddress: str | None = None,
    settings: Settings = Depends(settings_dep),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> JSONResponse:
    if not userAddress:
        return api_error("User address is required", 400)
    try:
        return api_success(await get_token_info(userAddress, settings, client_factory=client_factory))
    except ConfigurationError as e:
        return api_error(str(e), 500)
    except Exception as e:
        logger.exception("token_info_failed", wallet=short_wallet(userAddress), error=str(e))
        return api_error(extract_error_message(e) or "Failed to fetch token info", 500)
