#!/usr/bin/env python3
"""Container entrypoint: apply migrations (PostgreSQL) then serve the API with uvicorn"""

import sys
import logging
from pathlib import Path
import uvicorn
from alembic import command
from alembic.config import Config

from core.config import settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("recipeshare.startup")

ALEMBIC_INI = Path(__file__).resolve().parent / "alembic.ini"


def upgrade_schema() -> None:
    """Bring the database to the latest Alembic revision"""
    if settings.is_sqlite:
        logger.info("SQLite database, tables are created by the app on startup")
        return

    logger.info("Applying database migrations")
    command.upgrade(Config(str(ALEMBIC_INI)), "head")


def start_server() -> None:
    logger.info(
        "Starting RecipeShare on %s:%s (environment=%s)",
        settings.HOST, settings.PORT, settings.ENVIRONMENT,
    )

    try:
        if settings.RUN_MIGRATIONS_ON_STARTUP:
            upgrade_schema()

        from main import app

        server = uvicorn.Server(uvicorn.Config(
            app=app,
            host=settings.HOST,
            port=settings.PORT,
            log_level=settings.LOG_LEVEL.lower(),
            access_log=False,  # LoggingMiddleware writes the access log
            use_colors=False,
            server_header=False,
            limit_concurrency=1000,
            timeout_keep_alive=5,
        ))
        server.run()

    except ImportError as e:
        logger.error(f"Failed to import app: {e}")
        sys.exit(1)
    except Exception:
        logger.exception("RecipeShare failed to start")
        sys.exit(1)


if __name__ == "__main__":
    start_server()
