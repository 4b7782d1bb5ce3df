"""Request bodies for the check-in and transfer routes."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from checkin_rewards.checkin.chains import get_chain_adapter
from checkin_rewards.config.constants import MAX_VARCHAR_LENGTH
from checkin_rewards.utils.wallet_utils import is_evm_address

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(value: str | None) -> str | None:
    if value is None:
        return None
    if not _EMAIL_RE.match(value):
        raise PydanticCustomError("email", "Invalid email")
    return value


class UnifiedCheckinRequest(BaseModel):
    """POST /api/checkin with an explicit chain; walletAddress must match the chain's format."""

    chain: Literal["evm", "solana", "stellar"]
    walletAddress: str = Field(..., min_length=1)
    email: str | None = Field(None, max_length=MAX_VARCHAR_LENGTH)
    checkpoint: str = Field(..., min_length=1)

    @field_validator("walletAddress")
    @classmethod
    def _wallet_matches_chain(cls, value: str, info: ValidationInfo) -> str:
        chain = info.data.get("chain")
        if chain is None:
            return value
        adapter = get_chain_adapter(chain)
        if not adapter.is_valid_address(value):
            raise PydanticCustomError(
                "wallet_format",
                "Invalid {label} wallet address format",
                {"label": adapter.label},
            )
        return value

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str | None) -> str | None:
        return _check_email(value)


class LegacyCheckinRequest(BaseModel):
    """POST /api/checkin without chain: EVM only."""

    walletAddress: str
    email: str | None = Field(None, max_length=MAX_VARCHAR_LENGTH)
    checkpoint: str = Field(..., min_length=1)

    @field_validator("walletAddress")
    @classmethod
    def _evm_wallet(cls, value: str) -> str:
        if not is_evm_address(value):
            raise PydanticCustomError("wallet_format", "Invalid EVM wallet address")
        return value

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str | None) -> str | None:
        return _check_email(value)


class SolanaCheckinRequest(BaseModel):
    """POST /api/solana-checkin. Required fields are checked by the route (400, not 422)."""

    solanaWalletAddress: str | None = None
    email: str | None = None
    checkpoint: str | None = None


class StellarCheckinRequest(BaseModel):
    stellarWalletAddress: str | None = None
    email: str | None = None
    checkpoint: str | None = None
    stellarWalletId: str | None = None


class TransferTokensRequest(BaseModel):
    fromAddress: str | None = None
    toAddress: str | None = None
    amount: Any = None
