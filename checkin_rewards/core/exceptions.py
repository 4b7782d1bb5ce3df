"""
Application-level exceptions.

Rate-limited check-ins are an expected outcome and are returned as results,
not raised. Everything here maps to an HTTP 4xx/5xx at the API layer.
"""

from __future__ import annotations

from typing import Any


class CheckinRewardsError(Exception):
    """Base class for domain errors."""


class RpcError(CheckinRewardsError):
    """JSON-RPC call failed (error payload or transport failure)."""

    def __init__(self, message: str, *, code: int | None = None, method: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.method = method


class ConfigurationError(CheckinRewardsError):
    """Required server configuration is missing."""


class TransferInProgressError(CheckinRewardsError):
    """A transfer for this source address is already in flight in this process."""

    def __init__(self, address: str) -> None:
        super().__init__("Transfer already in progress for this address")
        self.address = address


def extract_error_message(exc: Any) -> str:
    """Best-effort message for an error value; "Unknown error" when nothing usable."""
    if isinstance(exc, BaseException):
        text = str(exc)
        if text:
            return text
        message = getattr(exc, "message", None)
        return str(message) if message else "Unknown error"
    if isinstance(exc, str):
        return exc
    if isinstance(exc, dict) and "message" in exc:
        return str(exc["message"])
    message = getattr(exc, "message", None)
    if message is not None:
        return str(message)
    return "Unknown error"
