"""
Checkin Rewards: checkpoint check-in accounting service.

Players check in at checkpoints from an EVM, Solana or Stellar wallet and
earn points under a daily limit. Also serves on-chain CheckIn events through
a process-local cache and guards token transfers per source address.
"""

__version__ = "0.1.0"
