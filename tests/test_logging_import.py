"""
Test that rewards_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from rewards_logging and use the logger."""
    from checkin_rewards.rewards_logging import bind_checkin, get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "exception")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")
    bind_checkin("solana", "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka", "cp-1").info("checkin_bound")


def test_wallets_shortened_and_event_renamed():
    """Processors shorten wallets, redact email and rename event to event_type."""
    from checkin_rewards.rewards_logging.logger import _rename_event, _shorten_wallets

    wallet = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
    event = {"event": "checkin_sample", "wallet": wallet, "email": "a@example.com", "chain": "solana"}
    event = _rename_event(None, "info", _shorten_wallets(None, "info", event))
    assert event["event_type"] == "checkin_sample"
    assert "event" not in event
    assert event["wallet"] == wallet[:16] + "..."
    assert event["email"] == "<redacted>"
    assert event["chain"] == "solana"
    assert event["service"] == "checkin-rewards"
