"""
Tests for the per-address TransferGuard.
"""

from __future__ import annotations

import asyncio

import pytest

from checkin_rewards.core.exceptions import TransferInProgressError
from checkin_rewards.transfers.guard import TransferGuard

ADDRESS = "0xAbCd000000000000000000000000000000000001"


def test_second_concurrent_call_rejected():
    """Exactly one of two overlapping transfers for the same address runs."""
    guard = TransferGuard()

    async def run():
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow():
            started.set()
            await release.wait()
            return "done"

        first = asyncio.ensure_future(guard.run(ADDRESS, slow))
        await started.wait()
        assert guard.is_locked(ADDRESS.lower())
        with pytest.raises(TransferInProgressError):
            await guard.run(ADDRESS.upper().replace("0X", "0x"), slow)
        # Rejection leaves the pending entry in place
        assert guard.is_locked(ADDRESS)
        release.set()
        return await first

    assert asyncio.run(run()) == "done"
    assert guard.in_flight() == []


def test_lock_released_after_failure():
    guard = TransferGuard()

    async def fail():
        raise RuntimeError("rpc down")

    async def ok():
        return 1

    async def run():
        with pytest.raises(RuntimeError):
            await guard.run(ADDRESS, fail)
        assert not guard.is_locked(ADDRESS)
        return await guard.run(ADDRESS, ok)

    assert asyncio.run(run()) == 1


def test_different_addresses_run_concurrently():
    guard = TransferGuard()
    other = "0x" + "2" * 40

    async def run():
        release = asyncio.Event()

        async def wait_release():
            await release.wait()
            return True

        a = asyncio.ensure_future(guard.run(ADDRESS, wait_release))
        b = asyncio.ensure_future(guard.run(other, wait_release))
        await asyncio.sleep(0)
        assert len(guard.in_flight()) == 2
        release.set()
        return await asyncio.gather(a, b)

    assert asyncio.run(run()) == [True, True]
