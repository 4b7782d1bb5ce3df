"""
Tests for the httpx JSON-RPC client and config helpers, using httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from checkin_rewards.chain.rpc import EvmRpcClient, encode_block, hex_to_int
from checkin_rewards.config.env import mask_url
from checkin_rewards.config.settings import get_settings
from checkin_rewards.core.exceptions import RpcError, extract_error_message


def _client(handler) -> EvmRpcClient:
    return EvmRpcClient("http://rpc.test", transport=httpx.MockTransport(handler))


def test_encode_block():
    assert encode_block(255) == "0xff"
    assert encode_block("latest") == "latest"
    assert encode_block("1000") == "0x3e8"
    assert encode_block("0x10") == "0x10"
    assert hex_to_int("0x10") == 16
    assert hex_to_int(None) == 0


def test_get_logs_sends_filter():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.update(body)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": [{"blockNumber": "0x1"}]})

    async def run():
        async with _client(handler) as client:
            return await client.get_logs("0xabc", ["0xtopic"], from_block=5, to_block="latest")

    logs = asyncio.run(run())
    assert logs == [{"blockNumber": "0x1"}]
    assert seen["method"] == "eth_getLogs"
    assert seen["params"] == [{"address": "0xabc", "topics": ["0xtopic"], "fromBlock": "0x5", "toBlock": "latest"}]


def test_error_payload_raises_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "limit exceeded"}})

    async def run():
        async with _client(handler) as client:
            await client.call("0xabc", "0x")

    with pytest.raises(RpcError) as exc_info:
        asyncio.run(run())
    assert exc_info.value.code == -32000
    assert exc_info.value.method == "eth_call"
    assert "limit exceeded" in str(exc_info.value)


def test_http_error_raises_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    async def run():
        async with _client(handler) as client:
            await client.get_block(1)

    with pytest.raises(RpcError):
        asyncio.run(run())


def test_extract_error_message():
    assert extract_error_message(RuntimeError("boom")) == "boom"
    assert extract_error_message("plain") == "plain"
    assert extract_error_message({"message": "from dict"}) == "from dict"
    assert extract_error_message(RuntimeError()) == "Unknown error"
    assert extract_error_message(42) == "Unknown error"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("BASE_RPC_URL", "https://base.example/rpc?apikey=secret")
    monkeypatch.setenv("SERVER_PRIVATE_KEY", "0xdeadbeef")
    settings = get_settings()
    assert settings.base_rpc_url == "https://base.example/rpc?apikey=secret"
    assert settings.daily_checkin_points == 100
    assert settings.daily_checkpoint_limit == 10
    assert "0xdeadbeef" not in repr(settings)
    assert "secret" not in mask_url(settings.base_rpc_url)
