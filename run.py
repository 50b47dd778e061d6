#!/usr/bin/env python3
"""
Personal Banking Core Entry Point

Starts the FastAPI server exposing registration, login, deposit, withdraw
and transfer operations.
"""

import sys

import uvicorn

from personal_banking.api import app
from personal_banking.config import get_config
from personal_banking.logging_config import get_logger, setup_logging


if __name__ == "__main__":
    config = get_config()
    setup_logging(config.log_level, config.log_format)
    logger = get_logger("personal_banking")
    logger.info(f"Starting personal banking core on {config.api_host}:{config.api_port}")

    try:
        uvicorn.run(app, host=config.api_host, port=config.api_port, log_level=config.log_level.lower())
    except KeyboardInterrupt:
        logger.info("Shutting down personal banking core")
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)
