"""
Reward token reads via eth_call: rewardToken() on the reward contract, then
balanceOf(address) / decimals() on the ERC-20 it points at.
"""

from __future__ import annotations

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from checkin_rewards.chain.rpc import EvmRpcClient


def _calldata(signature: str, types: list[str] | None = None, args: list | None = None) -> str:
    selector = function_signature_to_4byte_selector(signature)
    encoded = abi_encode(types, args) if types else b""
    return "0x" + (selector + encoded).hex()


def _result_bytes(result: str) -> bytes:
    return bytes.fromhex(result.removeprefix("0x"))


async def get_reward_token_address(client: EvmRpcClient, reward_contract: str) -> str:
    result = await client.call(reward_contract, _calldata("rewardToken()"))
    (address,) = abi_decode(["address"], _result_bytes(result))
    return to_checksum_address(address)


async def get_token_balance(client: EvmRpcClient, token: str, owner: str) -> int:
    data = _calldata("balanceOf(address)", ["address"], [to_checksum_address(owner)])
    result = await client.call(token, data)
    (balance,) = abi_decode(["uint256"], _result_bytes(result))
    return int(balance)


async def get_token_decimals(client: EvmRpcClient, token: str) -> int:
    result = await client.call(token, _calldata("decimals()"))
    (decimals,) = abi_decode(["uint8"], _result_bytes(result))
    return int(decimals)
