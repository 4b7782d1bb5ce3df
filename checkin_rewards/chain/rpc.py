"""
Minimal async EVM JSON-RPC client over httpx.

Covers the three calls the service needs: eth_getLogs (CheckIn events),
eth_getBlockByNumber (event timestamps) and eth_call (reward token reads).
Transport and RPC errors raise RpcError; no retries.
"""

from __future__ import annotations

import itertools
from typing import Any

import httpx

from checkin_rewards.core.exceptions import RpcError
from checkin_rewards.rewards_logging import get_logger

logger = get_logger(__name__)

DEFAULT_RPC_TIMEOUT_SEC = 12.0

BlockTag = int | str
"""Block number, or "earliest" / "latest"."""

_request_ids = itertools.count(1)


def encode_block(block: BlockTag) -> str:
    if isinstance(block, int):
        return hex(block)
    tag = str(block).strip()
    if tag in ("earliest", "latest", "pending", "safe", "finalized"):
        return tag
    if tag.startswith("0x"):
        return tag
    return hex(int(tag))


def hex_to_int(value: str | None) -> int:
    if not value:
        return 0
    return int(value, 16)


def build_rpc_body(method: str, params: list[Any]) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": next(_request_ids),
        "method": method,
        "params": params,
    }


class EvmRpcClient:
    """
    Async JSON-RPC client bound to one endpoint.

    Use as an async context manager, or call aclose() when done. Pass
    transport (e.g. httpx.MockTransport) in tests.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout: float = DEFAULT_RPC_TIMEOUT_SEC,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not rpc_url:
            raise ValueError("rpc_url must be non-empty")
        self._rpc_url = rpc_url
        self._client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), transport=transport)

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    async def __aenter__(self) -> EvmRpcClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call; raise RpcError on transport or RPC error."""
        body = build_rpc_body(method, params)
        try:
            resp = await self._client.post(self._rpc_url, json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            logger.warning("rpc_transport_error", method=method, error=str(e))
            raise RpcError(f"RPC transport error: {e}", method=method) from e
        except ValueError as e:
            raise RpcError("RPC returned invalid JSON", method=method) from e
        if "error" in data and data["error"]:
            err = data["error"]
            message = err.get("message", str(err)) if isinstance(err, dict) else str(err)
            code = err.get("code") if isinstance(err, dict) else None
            raise RpcError(f"RPC error: {message} (code={code})", code=code, method=method)
        return data.get("result")

    async def get_logs(
        self,
        address: str,
        topics: list[str | None],
        *,
        from_block: BlockTag = "earliest",
        to_block: BlockTag = "latest",
    ) -> list[dict[str, Any]]:
        params = {
            "address": address,
            "topics": topics,
            "fromBlock": encode_block(from_block),
            "toBlock": encode_block(to_block),
        }
        result = await self.request("eth_getLogs", [params])
        return list(result or [])

    async def get_block(self, number: int) -> dict[str, Any] | None:
        return await self.request("eth_getBlockByNumber", [encode_block(number), False])

    async def call(self, to: str, data: str, block: BlockTag = "latest") -> str:
        result = await self.request("eth_call", [{"to": to, "data": data}, encode_block(block)])
        return result or "0x"
