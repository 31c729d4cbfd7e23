"""Wait for the database and create the settings schema."""

import asyncio
import logging
import os

from themekit.db.session import check_database, close_engine, create_schema
from themekit.logging_config import configure_logging, parse_redact_fields
from themekit.settings import settings

configure_logging(
    level=settings.log_level,
    log_format=settings.log_format,
    redact_fields=parse_redact_fields(settings.log_redact_fields),
    include_uvicorn_access=settings.log_uvicorn_access,
)

logger = logging.getLogger(__name__)


async def init_database() -> int:
    timeout_seconds = int(os.getenv("DB_WAIT_TIMEOUT_SECONDS", "60"))
    interval_seconds = int(os.getenv("DB_WAIT_INTERVAL_SECONDS", "2"))
    retries = max(timeout_seconds // max(interval_seconds, 1), 1)

    try:
        for attempt in range(1, retries + 1):
            if await check_database():
                await create_schema()
                return 0
            logger.info(
                "db.init_retry",
                extra={"event": "db.init_retry", "attempt": attempt, "retries": retries},
            )
            await asyncio.sleep(interval_seconds)
    finally:
        await close_engine()

    logger.error("db.init_timeout", extra={"event": "db.init_timeout", "retries": retries})
    return 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(init_database()))
