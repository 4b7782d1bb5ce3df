"""
Tests for POST/GET /api/transfer-tokens. Settings and the Base RPC client
factory are overridden; concurrent requests go through httpx.ASGITransport.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector

from checkin_rewards.api_server.deps import get_client_factory, settings_dep
from checkin_rewards.config.settings import Settings

FROM = "0x1111111111111111111111111111111111111111"
TO = "0x2222222222222222222222222222222222222222"
TOKEN = "0x3333333333333333333333333333333333333333"
REWARD = "0xf2894fEd9CAa5E6422bF45D9fE1B38b06D9c46b8"


def _selector(signature: str) -> str:
    return "0x" + function_signature_to_4byte_selector(signature).hex()


def make_settings(**overrides) -> Settings:
    values = dict(
        database_url="sqlite://",
        checkin_rpc_url="http://checkin.invalid",
        checkin_contract_address="0x579F247094842cBB88C43a2568cD25c905092179",
        base_rpc_url="http://base.invalid",
        reward1155_address=REWARD,
        server_private_key="0x" + "ab" * 32,
    )
    values.update(overrides)
    return Settings(**values)


class FakeBaseRpc:
    """eth_call responder for rewardToken/balanceOf/decimals."""

    def __init__(self, token: str = TOKEN, balance: int = 10_000, decimals: int = 18, gate=None):
        self.token = token
        self.balance = balance
        self.decimals = decimals
        self.gate = gate

    def __call__(self, rpc_url: str):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def call(self, to: str, data: str, block="latest") -> str:
        if self.gate is not None:
            await self.gate()
        selector = data[:10]
        if selector == _selector("rewardToken()"):
            return "0x" + abi_encode(["address"], [self.token]).hex()
        if selector == _selector("balanceOf(address)"):
            return "0x" + abi_encode(["uint256"], [self.balance]).hex()
        if selector == _selector("decimals()"):
            return "0x" + abi_encode(["uint8"], [self.decimals]).hex()
        raise AssertionError(f"unexpected call {selector}")


@pytest.fixture
def override(app):
    def _apply(settings: Settings | None = None, rpc: FakeBaseRpc | None = None):
        app.dependency_overrides[settings_dep] = lambda: settings or make_settings()
        app.dependency_overrides[get_client_factory] = lambda: rpc or FakeBaseRpc()

    yield _apply
    app.dependency_overrides.clear()


def test_transfer_validation_errors(client, override):
    override()
    cases = [
        ({"toAddress": TO, "amount": 1}, "From address, to address, and amount are required"),
        ({"fromAddress": FROM, "toAddress": TO}, "From address, to address, and amount are required"),
        ({"fromAddress": FROM, "toAddress": FROM.upper().replace("0X", "0x"), "amount": 1}, "Cannot transfer to the same address"),
        ({"fromAddress": FROM, "toAddress": TO, "amount": "abc"}, "Amount must be an integer"),
        ({"fromAddress": FROM, "toAddress": TO, "amount": -5}, "Amount must be greater than 0"),
    ]
    for payload, error in cases:
        r = client.post("/api/transfer-tokens", json=payload)
        assert r.status_code == 400, payload
        assert r.json() == {"success": False, "error": error}


def test_transfer_missing_private_key(client, override):
    override(settings=make_settings(server_private_key=None))
    r = client.post("/api/transfer-tokens", json={"fromAddress": FROM, "toAddress": TO, "amount": 1})
    assert r.status_code == 500
    assert r.json()["error"] == "Server configuration error"


def test_transfer_no_reward_token(client, override):
    override(rpc=FakeBaseRpc(token="0x" + "0" * 40))
    r = client.post("/api/transfer-tokens", json={"fromAddress": FROM, "toAddress": TO, "amount": 1})
    assert r.status_code == 400
    assert r.json()["error"] == "No reward token configured"


def test_transfer_insufficient_balance(client, override):
    override(rpc=FakeBaseRpc(balance=5))
    r = client.post("/api/transfer-tokens", json={"fromAddress": FROM, "toAddress": TO, "amount": 6})
    assert r.status_code == 400
    assert r.json()["error"] == "Insufficient token balance"


def test_transfer_refused_server_signing(client, override):
    override()
    r = client.post("/api/transfer-tokens", json={"fromAddress": FROM, "toAddress": TO, "amount": "100"})
    assert r.status_code == 500
    assert r.json()["error"] == "Direct server transfers not supported. Use client-side signing instead."


def test_concurrent_transfer_same_address_gets_429(app, override):
    """Second request for a pending source address is rejected; the slot frees afterwards."""

    async def run():
        started = asyncio.Event()
        release = asyncio.Event()

        async def gate():
            started.set()
            await release.wait()

        rpc = FakeBaseRpc(gate=gate)
        override(rpc=rpc)
        payload = {"fromAddress": FROM, "toAddress": TO, "amount": 1}
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
            first = asyncio.ensure_future(ac.post("/api/transfer-tokens", json=payload))
            await started.wait()
            second = await ac.post("/api/transfer-tokens", json=payload)
            release.set()
            first_resp = await first

            rpc.gate = None
            third = await ac.post("/api/transfer-tokens", json=payload)
        return first_resp, second, third

    first, second, third = asyncio.run(run())
    assert second.status_code == 429
    assert second.json() == {"success": False, "error": "Transfer already in progress for this address"}
    assert first.status_code == 500
    assert first.json()["error"] == "Direct server transfers not supported. Use client-side signing instead."
    assert third.status_code == 500
    assert third.json()["error"].startswith("Direct server transfers not supported")
    assert app.state.transfer_guard.in_flight() == []


def test_rpc_failure_inside_guard_releases_lock(client, override, app):
    async def broken():
        raise RuntimeError("rpc down")

    override(rpc=FakeBaseRpc(gate=broken))
    r = client.post("/api/transfer-tokens", json={"fromAddress": FROM, "toAddress": TO, "amount": 1})
    assert r.status_code == 500
    assert r.json()["error"] == "rpc down"
    assert app.state.transfer_guard.in_flight() == []


def test_token_info(client, override):
    override(rpc=FakeBaseRpc(balance=12345, decimals=6))
    r = client.get("/api/transfer-tokens", params={"userAddress": FROM})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["tokenAddress"].lower() == TOKEN
    assert data["balance"] == "12345"
    assert data["decimals"] == 6


def test_token_info_without_reward_token(client, override):
    override(rpc=FakeBaseRpc(token="0x" + "0" * 40))
    r = client.get("/api/transfer-tokens", params={"userAddress": FROM})
    assert r.json()["data"] == {"tokenAddress": None, "balance": "0", "decimals": 18}


def test_token_info_errors(client, override):
    override()
    r = client.get("/api/transfer-tokens")
    assert r.status_code == 400
    assert r.json()["error"] == "User address is required"

    override(settings=make_settings(base_rpc_url=None))
    r = client.get("/api/transfer-tokens", params={"userAddress": FROM})
    assert r.status_code == 500
    assert r.json()["error"] == "Server configuration error"
