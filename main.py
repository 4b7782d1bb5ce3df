"""
Main entrypoint: create tables, then run the FastAPI server.

Env: CHECKIN_DB_URL / DATABASE_URL (or CHECKIN_DB_PATH), CHECKIN_RPC_URL,
CHECKIN_CONTRACT_ADDRESS, BASE_RPC_URL, API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT.

Equivalent: uvicorn checkin_rewards.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

import uvicorn

# Configure structured JSON logging before other imports that may log
from checkin_rewards.rewards_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Initialise the database and serve the API in the main thread."""
    from checkin_rewards.config.env import mask_url
    from checkin_rewards.config.settings import get_settings
    from checkin_rewards.database import init_db

    api_host = os.getenv("API_HOST", "0.0.0.0").strip()
    api_port = int(os.getenv("API_PORT", "8000").strip() or "8000")

    settings = get_settings()
    init_db()
    logger.info(
        "main_starting",
        host=api_host,
        port=api_port,
        database=mask_url(settings.database_url),
        checkin_rpc=mask_url(settings.checkin_rpc_url),
        checkin_contract=settings.checkin_contract_address,
    )

    uvicorn.run(
        "checkin_rewards.api_server.app:app",
        host=api_host,
        port=api_port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
