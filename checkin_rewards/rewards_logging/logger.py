"""
Structured logging for the rewards service.

Every record carries event_type, level, logger and an ISO 8601 UTC
timestamp. Wallet-like keys are shortened before rendering so full
addresses and emails stay out of aggregated logs.

LOG_LEVEL picks the threshold, LOG_FORMAT=json|console the renderer.
This module must not import checkin_rewards (imported by everything).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

SERVICE_NAME = "checkin-rewards"

_WALLET_KEYS = ("wallet", "from_wallet", "to_wallet", "user")
_WALLET_PREFIX_LEN = 16


def _shorten(value: str) -> str:
    if len(value) <= _WALLET_PREFIX_LEN:
        return value
    return value[:_WALLET_PREFIX_LEN] + "..."


def _shorten_wallets(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    for key in _WALLET_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = _shorten(value)
    if isinstance(event_dict.get("email"), str):
        event_dict["email"] = "<redacted>"
    return event_dict


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_structlog(log_format: str = LOG_FORMAT, level: int = LOG_LEVEL_VALUE) -> None:
    """Install the processor chain. Called once at import; tests may call it again."""
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _shorten_wallets,
        _rename_event,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger; the first positional argument is the event name.

        logger = get_logger(__name__)
        logger.info("checkin_recorded", wallet=addr, chain="solana", points=100)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_checkin(chain: str, wallet: str, checkpoint: str | None = None) -> structlog.BoundLogger:
    """Logger carrying chain/wallet/checkpoint for one check-in request."""
    log = get_logger("checkin_rewards.checkin").bind(chain=chain, wallet=wallet)
    if checkpoint is not None:
        log = log.bind(checkpoint=checkpoint)
    return log
