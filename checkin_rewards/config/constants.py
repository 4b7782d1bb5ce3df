"""Constants shared across the check-in flow."""

DAILY_CHECKIN_POINTS = 100
DAILY_CHECKPOINT_LIMIT = 10

ACTIVITY_TYPE_CHECKPOINT = "checkpoint_checkin"

# Seconds a cached CheckIn event list stays fresh
EVENT_CACHE_TTL_SEC = 5 * 60

MAX_VARCHAR_LENGTH = 255

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
