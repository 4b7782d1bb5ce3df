"""
Structured logging for Checkin Rewards.

JSON logs with timestamp, event_type, wallet and chain.
Use get_logger() in all modules for aggregation-friendly output.
"""

from checkin_rewards.rewards_logging.logger import bind_checkin, configure_structlog, get_logger

__all__ = ["bind_checkin", "configure_structlog", "get_logger"]
