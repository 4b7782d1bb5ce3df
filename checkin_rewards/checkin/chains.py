"""
Chain adapters: what differs between EVM, Solana and Stellar check-ins.

Each adapter says which ledger field scopes the daily limit, what goes into
the activity metadata, and how the chain is named in messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from checkin_rewards.database.activities import EVM_WALLET_COLUMN, WalletFilter
from checkin_rewards.database.models import PlayerRecord
from checkin_rewards.utils.wallet_utils import is_evm_address, is_solana_address, is_stellar_address

CHAINS = ("evm", "solana", "stellar")


@dataclass(frozen=True)
class ChainAdapter:
    chain: str
    display_name: str
    """Prefix used in descriptions and messages ("" for EVM, "Solana " ...)."""
    filter_field: str
    tag_metadata: bool
    """Solana/Stellar rows carry chain, wallet and player id in metadata."""

    def wallet_filter(self, address: str) -> WalletFilter:
        return WalletFilter(field=self.filter_field, value=address)

    def build_metadata(
        self,
        checkpoint: str,
        email: str | None,
        address: str,
        player: PlayerRecord,
    ) -> dict[str, Any]:
        metadata: dict[str, Any] = {"checkpoint": checkpoint, "email": email}
        if self.tag_metadata:
            metadata["chain"] = self.chain
            metadata[self.filter_field] = address
            metadata["player_id"] = player.id
        return metadata

    def is_valid_address(self, address: str) -> bool:
        if self.chain == "evm":
            return is_evm_address(address)
        if self.chain == "solana":
            return is_solana_address(address)
        return is_stellar_address(address)

    @property
    def label(self) -> str:
        return {"evm": "EVM", "solana": "Solana", "stellar": "Stellar"}[self.chain]


EVM = ChainAdapter(chain="evm", display_name="", filter_field=EVM_WALLET_COLUMN, tag_metadata=False)
SOLANA = ChainAdapter(chain="solana", display_name="Solana ", filter_field="solana_wallet", tag_metadata=True)
STELLAR = ChainAdapter(chain="stellar", display_name="Stellar ", filter_field="stellar_wallet", tag_metadata=True)

_ADAPTERS = {a.chain: a for a in (EVM, SOLANA, STELLAR)}


def get_chain_adapter(chain: str) -> ChainAdapter:
    try:
        return _ADAPTERS[chain]
    except KeyError:
        raise ValueError(f"Unsupported chain type: {chain}") from None
