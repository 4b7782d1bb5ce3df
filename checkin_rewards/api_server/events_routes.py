"""
CheckIn event routes: GET /checkin-events (JSON or CSV) and
POST /checkin-events/invalidate-cache.

Events come from the process EventCache; checkpoint filtering, ordering and
pagination happen after the cache.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from checkin_rewards.api_server.deps import get_checkin_client, get_event_cache, settings_dep
from checkin_rewards.api_server.responses import api_error, api_success
from checkin_rewards.chain.events import CheckInEvent, EventCache, events_to_csv
from checkin_rewards.chain.rpc import BlockTag, EvmRpcClient, hex_to_int
from checkin_rewards.config.settings import Settings
from checkin_rewards.rewards_logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["checkin-events"])


def _parse_block(value: str) -> BlockTag:
    value = (value or "").strip()
    if value.isdigit():
        return int(value)
    return value or "latest"


async def _with_timestamp(client: EvmRpcClient, event: CheckInEvent) -> CheckInEvent:
    if event.timestamp:
        return event
    try:
        block = await client.get_block(event.block_number)
    except Exception as e:
        logger.debug("checkin_event_block_lookup_failed", block=event.block_number, error=str(e))
        return event
    if not block:
        return event
    # Copy: the cached event list is shared between requests
    return replace(event, timestamp=hex_to_int(block.get("timestamp")))


@router.get("/checkin-events")
async def list_checkin_events(
    limit: int = Query(100, ge=0),
    offset: int = Query(0, ge=0),
    user: str | None = None,
    checkpoint: int | None = None,
    fromBlock: str = "earliest",
    toBlock: str = "latest",
    refresh: str = "false",
    export: str | None = None,
    cache: EventCache = Depends(get_event_cache),
    client: EvmRpcClient = Depends(get_checkin_client),
    settings: Settings = Depends(settings_dep),
) -> Response:
    force_refresh = refresh == "true"
    try:
        status_before = cache.status()
        all_events = await cache.fetch(
            client,
            settings.checkin_contract_address,
            force_refresh=force_refresh,
            from_block=_parse_block(fromBlock),
            to_block=_parse_block(toBlock),
            user_address=user or None,
        )
        status_after = cache.status()

        events = all_events
        if checkpoint is not None:
            events = [e for e in events if e.checkpoint_id == checkpoint]
        total = len(events)
        page = sorted(events, key=lambda e: e.block_number, reverse=True)[offset : offset + limit]
        page = list(await asyncio.gather(*(_with_timestamp(client, e) for e in page)))

        if export == "csv":
            filename = f"checkin-events-{datetime.now(timezone.utc).date().isoformat()}.csv"
            return Response(
                content=events_to_csv(page),
                media_type="text/csv; charset=utf-8",
                headers={
                    "Content-Disposition": f'attachment; filename="{filename}"',
                    "Cache-Control": "no-cache, no-store, must-revalidate",
                    "Pragma": "no-cache",
                    "Expires": "0",
                },
            )

        return JSONResponse(
            content={
                "success": True,
                "events": [e.to_dict() for e in page],
                "pagination": {
                    "total": total,
                    "limit": limit,
                    "offset": offset,
                    "hasMore": offset + limit < total,
                },
                "cache": {
                    "wasCached": status_before.is_cached and not force_refresh,
                    "refreshed": not status_before.is_cached or force_refresh,
                    "lastUpdated": status_after.last_updated,
                    "expiresAt": status_after.expires_at,
                },
            }
        )
    except Exception as e:
        logger.exception("checkin_events_fetch_failed", error=str(e))
        return api_error("Failed to fetch CheckIn events", 500)


@router.post("/checkin-events/invalidate-cache")
def invalidate_checkin_events_cache(cache: EventCache = Depends(get_event_cache)) -> JSONResponse:
    before = cache.status()
    cache.invalidate()
    after = cache.status()
    logger.info("checkin_events_cache_invalidated", had_events=before.event_count)
    return api_success(
        {"before": before.to_dict(), "after": after.to_dict()},
        "Cache invalidated successfully",
    )
