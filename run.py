#  Agent Dashboard - Entry Point
#
#  Validates configuration, sets up logging, then serves dashboard.app
#  with uvicorn. Exits non-zero on a fatal config problem instead of
#  letting the server start half-configured.
#
#  Depends on: dashboard/app.py, dashboard/config.py, dashboard/logging_config.py
#  Used by:    (run directly)

import logging
import sys

import uvicorn

from dashboard.config import HOST, LOG_FORMAT, LOG_LEVEL, PORT, RELOAD, ConfigError, validate_config
from dashboard.logging_config import setup_logging

logger = logging.getLogger("dashboard.run")


def main() -> int:
    setup_logging(level=LOG_LEVEL, fmt=LOG_FORMAT)

    try:
        validate_config()
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    logger.info("Serving dashboard on %s:%d", HOST, PORT)
    uvicorn.run("dashboard.app:app", host=HOST, port=PORT, reload=RELOAD, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
