"""
Reward token transfer and token info.

Server-side transfers would need an allowance from the user, so after the
configuration, token and balance checks the transfer is refused and clients
are told to sign on their side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from checkin_rewards.chain import reward_token
from checkin_rewards.chain.rpc import EvmRpcClient
from checkin_rewards.config.constants import ZERO_ADDRESS
from checkin_rewards.config.settings import Settings
from checkin_rewards.core.exceptions import ConfigurationError
from checkin_rewards.rewards_logging import get_logger
from checkin_rewards.utils.wallet_utils import short_wallet

logger = get_logger(__name__)

ClientFactory = Callable[[str], EvmRpcClient]


@dataclass
class TransferOutcome:
    status_code: int
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def _require_base_rpc(settings: Settings) -> str:
    if not settings.base_rpc_url:
        logger.error("transfer_config_missing", setting="BASE_RPC_URL")
        raise ConfigurationError("Server configuration error")
    return settings.base_rpc_url


def _require_reward_contract(settings: Settings) -> str:
    if not settings.reward1155_address:
        logger.error("transfer_config_missing", setting="REWARD1155_ADDRESS")
        raise ConfigurationError("Server configuration error")
    return settings.reward1155_address


async def perform_transfer(
    from_address: str,
    to_address: str,
    amount: int,
    settings: Settings,
    *,
    client_factory: ClientFactory = EvmRpcClient,
) -> TransferOutcome:
    if not settings.server_private_key:
        logger.error("transfer_config_missing", setting="SERVER_PRIVATE_KEY")
        return TransferOutcome(500, "Server configuration error")
    try:
        rpc_url = _require_base_rpc(settings)
        reward_contract = _require_reward_contract(settings)
    except ConfigurationError as e:
        return TransferOutcome(500, str(e))

    async with client_factory(rpc_url) as client:
        token = await reward_token.get_reward_token_address(client, reward_contract)
        if not token or token.lower() == ZERO_ADDRESS:
            return TransferOutcome(400, "No reward token configured")

        balance = await reward_token.get_token_balance(client, token, from_address)
        if balance < amount:
            logger.info("transfer_insufficient_balance", wallet=short_wallet(from_address), balance=balance, amount=amount)
            return TransferOutcome(400, "Insufficient token balance")

    logger.info("transfer_refused_server_signing", wallet=short_wallet(from_address), to=short_wallet(to_address))
    return TransferOutcome(500, "Direct server transfers not supported. Use client-side signing instead.")


async def get_token_info(
    user_address: str,
    settings: Settings,
    *,
    client_factory: ClientFactory = EvmRpcClient,
) -> dict[str, Any]:
    """Reward token address, user balance (string) and decimals."""
    rpc_url = _require_base_rpc(settings)
    reward_contract = _require_reward_contract(settings)

    async with client_factory(rpc_url) as client:
        token = await reward_token.get_reward_token_address(client, reward_contract)
        if not token or token.lower() == ZERO_ADDRESS:
            return {"tokenAddress": None, "balance": "0", "decimals": 18}
        balance = await reward_token.get_token_balance(client, token, user_address)
        decimals = await reward_token.get_token_decimals(client, token)
    return {"tokenAddress": token, "balance": str(balance), "decimals": decimals}
