"""
On-chain CheckIn events and their process-local cache.

EventCache keeps a single slot: one event list with last_updated/expires_at.
A fresh slot is returned as-is for any fetch without force_refresh, whatever
filters the caller passes; the filters only matter when the slot is empty,
expired or force-refreshed. Lost on restart.
"""

from __future__ import annotations

import csv
import io
import time
from dataclasses import dataclass
from typing import Any, Callable

from eth_abi import decode as abi_decode
from eth_utils import keccak, to_checksum_address

from checkin_rewards.chain.rpc import BlockTag, EvmRpcClient, hex_to_int
from checkin_rewards.config.constants import EVENT_CACHE_TTL_SEC
from checkin_rewards.rewards_logging import get_logger

logger = get_logger(__name__)

# event CheckIn(address indexed user, uint256 checkpointId, uint256 points)
CHECKIN_EVENT_SIGNATURE = "CheckIn(address,uint256,uint256)"
CHECKIN_EVENT_TOPIC = "0x" + keccak(text=CHECKIN_EVENT_SIGNATURE).hex()

CSV_HEADERS = ["user", "checkpointId", "points", "blockNumber", "transactionHash", "timestamp"]


@dataclass
class CheckInEvent:
    user: str
    checkpoint_id: int
    points: int
    block_number: int
    transaction_hash: str
    timestamp: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON form; uint256 values are strings."""
        out: dict[str, Any] = {
            "user": self.user,
            "checkpointId": str(self.checkpoint_id),
            "points": str(self.points),
            "blockNumber": str(self.block_number),
            "transactionHash": self.transaction_hash,
        }
        if self.timestamp is not None:
            out["timestamp"] = self.timestamp
        return out


def address_topic(address: str) -> str:
    """Left-pad a 20-byte address to a 32-byte topic."""
    return "0x" + "0" * 24 + address.lower().removeprefix("0x")


def decode_checkin_log(log: dict[str, Any]) -> CheckInEvent:
    """Decode one eth_getLogs entry for the CheckIn event."""
    topics = log.get("topics") or []
    if len(topics) < 2:
        raise ValueError("CheckIn log is missing the indexed user topic")
    user = to_checksum_address("0x" + topics[1][-40:])
    raw = bytes.fromhex((log.get("data") or "0x").removeprefix("0x"))
    checkpoint_id, points = abi_decode(["uint256", "uint256"], raw)
    return CheckInEvent(
        user=user,
        checkpoint_id=int(checkpoint_id),
        points=int(points),
        block_number=hex_to_int(log.get("blockNumber")),
        transaction_hash=log.get("transactionHash") or "",
    )


def events_to_csv(events: list[CheckInEvent]) -> str:
    """CSV with a header row; fields containing commas are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADERS)
    for e in events:
        writer.writerow([
            e.user,
            str(e.checkpoint_id),
            str(e.points),
            str(e.block_number),
            e.transaction_hash,
            str(e.timestamp) if e.timestamp else "",
        ])
    return buf.getvalue()


@dataclass
class EventCacheStatus:
    is_cached: bool
    last_updated: int | None
    expires_at: int | None
    event_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "isCached": self.is_cached,
            "lastUpdated": self.last_updated,
            "expiresAt": self.expires_at,
            "eventCount": self.event_count,
        }


@dataclass
class _CacheEntry:
    events: list[CheckInEvent]
    last_updated: int
    expires_at: int


class EventCache:
    """
    Single-slot, time-expiring cache of CheckIn events.

    Timestamps are epoch milliseconds. One instance lives on app.state for the
    process; tests construct their own with a fake clock.
    """

    def __init__(
        self,
        ttl_sec: float = EVENT_CACHE_TTL_SEC,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl_ms = int(ttl_sec * 1000)
        self._clock = clock
        self._entry: _CacheEntry | None = None

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def fetch(
        self,
        client: EvmRpcClient,
        contract_address: str,
        *,
        force_refresh: bool = False,
        from_block: BlockTag = "earliest",
        to_block: BlockTag = "latest",
        user_address: str | None = None,
    ) -> list[CheckInEvent]:
        now = self._now_ms()
        if not force_refresh and self._entry is not None and self._entry.expires_at > now:
            return self._entry.events

        topics: list[str | None] = [CHECKIN_EVENT_TOPIC]
        if user_address:
            topics.append(address_topic(user_address))
        logs = await client.get_logs(
            contract_address,
            topics,
            from_block=from_block,
            to_block=to_block,
        )
        events = [decode_checkin_log(log) for log in logs]

        self._entry = _CacheEntry(events=events, last_updated=now, expires_at=now + self._ttl_ms)
        logger.info(
            "checkin_events_refreshed",
            count=len(events),
            forced=force_refresh,
            user=user_address,
            from_block=str(from_block),
            to_block=str(to_block),
        )
        return events

    def invalidate(self) -> None:
        self._entry = None

    def status(self) -> EventCacheStatus:
        if self._entry is None:
            return EventCacheStatus(is_cached=False, last_updated=None, expires_at=None, event_count=0)
        return EventCacheStatus(
            is_cached=True,
            last_updated=self._entry.last_updated,
            expires_at=self._entry.expires_at,
            event_count=len(self._entry.events),
        )
