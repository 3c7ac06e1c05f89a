"""Server entry point for helloworldapp.

Startup order:
    1. Load configuration and configure logging
    2. Open the database and apply pending migrations
    3. Build the FastAPI app around the migrated connection
    4. Bind the listener with uvicorn

Usage:
    python -m api.server
    python -m api.server --port 9000
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from config import ConfigManager, ConfigError
from migrations import MigrationError
from storage import init_database
from api.main import create_app

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(funcName)s > %(levelname).4s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger for the server process."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="helloworldapp server")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Configuration directory (default: ~/helloworldapp)",
    )
    parser.add_argument("--host", default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Bind port")
    args = parser.parse_args(argv)

    try:
        config = ConfigManager(args.config_dir).get_config()
    except ConfigError as e:
        configure_logging()
        logger.error(str(e))
        sys.exit(1)

    configure_logging(config.log_level)
    logger.info("Running startup")

    try:
        conn, report = init_database(config)
    except MigrationError as e:
        logger.error(f"Database migration failed, not starting server: {e}")
        sys.exit(1)

    if not report.succeeded:
        logger.warning(
            f"Starting with schema version {report.final_version}: {report.error}"
        )

    app = create_app(conn, config)

    host = args.host or config.api_host
    port = args.port or config.api_port
    logger.info(f"Starting server on {host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        timeout_keep_alive=config.timeout_seconds,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
