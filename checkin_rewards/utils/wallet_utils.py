"""Wallet validation utilities for the supported chains."""

from __future__ import annotations

import re

from solders.pubkey import Pubkey

_EVM_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")
_STELLAR_RE = re.compile(r"^G[A-Z0-9]{55}$")


def is_evm_address(w: str) -> bool:
    return bool(w) and _EVM_RE.match(w) is not None


def is_solana_address(w: str) -> bool:
    """Return True if w is a valid Solana wallet (Pubkey) address."""
    try:
        Pubkey.from_string(w.strip())
        return True
    except Exception:
        return False


def is_stellar_address(w: str) -> bool:
    return bool(w) and _STELLAR_RE.match(w) is not None


def normalize_evm_address(w: str) -> str:
    return (w or "").strip().lower()


def short_wallet(w: str | None) -> str:
    """Truncated address for log output."""
    if not w:
        return ""
    return w[:16] + "..." if len(w) > 16 else w
