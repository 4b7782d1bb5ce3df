"""
FastAPI dependencies: settings, the process-local event cache and transfer
guard (held on app.state), and RPC clients. Tests override these.
"""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends, Request

from checkin_rewards.chain.events import EventCache
from checkin_rewards.chain.rpc import EvmRpcClient
from checkin_rewards.config.settings import Settings, get_settings
from checkin_rewards.transfers.guard import TransferGuard
from checkin_rewards.transfers.service import ClientFactory


def settings_dep() -> Settings:
    return get_settings()


def get_event_cache(request: Request) -> EventCache:
    return request.app.state.event_cache


def get_transfer_guard(request: Request) -> TransferGuard:
    return request.app.state.transfer_guard


async def get_checkin_client(settings: Settings = Depends(settings_dep)) -> AsyncIterator[EvmRpcClient]:
    """RPC client for the chain holding the check-in contract; closed after the request."""
    async with EvmRpcClient(settings.checkin_rpc_url) as client:
        yield client


def get_client_factory() -> ClientFactory:
    """Factory used by transfer routes to open a Base RPC client."""
    return EvmRpcClient
