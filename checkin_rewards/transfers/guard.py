"""
Per-address transfer guard.

Maps a lowercase source address to the in-flight transfer task. A second
request for the same address while the first is pending is rejected
immediately; the entry is dropped when the task settles, success or failure.
Process-local: no protection across replicas, reset on restart.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from checkin_rewards.core.exceptions import TransferInProgressError
from checkin_rewards.rewards_logging import get_logger
from checkin_rewards.utils.wallet_utils import normalize_evm_address, short_wallet

logger = get_logger(__name__)

T = TypeVar("T")


class TransferGuard:
    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Task[Any]] = {}

    def is_locked(self, address: str) -> bool:
        return normalize_evm_address(address) in self._locks

    def in_flight(self) -> list[str]:
        return list(self._locks)

    async def run(self, address: str, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Run factory() as the pending transfer for address and return its result.

        Raises TransferInProgressError, without touching the map, when a
        transfer for the same address is already pending.
        """
        key = normalize_evm_address(address)
        if key in self._locks:
            logger.info("transfer_rejected_in_progress", wallet=short_wallet(key))
            raise TransferInProgressError(key)

        async def _guarded() -> T:
            try:
                return await factory()
            finally:
                self._locks.pop(key, None)

        task = asyncio.ensure_future(_guarded())
        self._locks[key] = task
        return await task
