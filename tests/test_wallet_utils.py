"""
Tests for wallet address validation per chain.
"""

from __future__ import annotations

from checkin_rewards.checkin.chains import get_chain_adapter
from checkin_rewards.utils.wallet_utils import (
    is_evm_address,
    is_solana_address,
    is_stellar_address,
    normalize_evm_address,
    short_wallet,
)

VALID_SOLANA = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"


def test_evm_address():
    assert is_evm_address("0x" + "aB" * 20)
    assert not is_evm_address("0x123")
    assert not is_evm_address("1x" + "a" * 40)
    assert not is_evm_address("")


def test_solana_address():
    assert is_solana_address(VALID_SOLANA)
    assert not is_solana_address("not-a-valid-pubkey")
    assert not is_solana_address("")


def test_stellar_address():
    assert is_stellar_address("G" + "A" * 55)
    assert not is_stellar_address("G" + "a" * 55)
    assert not is_stellar_address("S" + "A" * 55)


def test_normalize_and_short():
    assert normalize_evm_address(" 0xABCDEF ") == "0xabcdef"
    assert short_wallet(VALID_SOLANA) == VALID_SOLANA[:16] + "..."
    assert short_wallet(None) == ""


def test_chain_adapters_validate_their_own_format():
    assert get_chain_adapter("evm").is_valid_address("0x" + "1" * 40)
    assert not get_chain_adapter("evm").is_valid_address(VALID_SOLANA)
    assert get_chain_adapter("solana").is_valid_address(VALID_SOLANA)
    assert get_chain_adapter("stellar").is_valid_address("G" + "A" * 55)
