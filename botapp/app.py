#!/usr/bin/env python3
"""
Operator bot and submission API - entrypoint around the runtime application.
"""
from tracking import t

import asyncio
import logging
import signal
import sys
from pathlib import Path

if __name__ == "__main__" and __package__ is None:
    sys.path.append(str(Path(__file__).resolve().parents[1]))
    __package__ = "botapp"

import tracking
from botapp.config import load_bot_config
from botapp.runtime import BotApplication
from infrastructure.logging_config import setup_logging


def signal_handler(signum, frame):
    """Handle SIGTERM by unwinding the event loop like Ctrl+C does."""
    t('botapp.app.signal_handler')
    logger = logging.getLogger('Main')
    logger.info("🚨 Received signal %s, initiating graceful shutdown...", signum)
    raise KeyboardInterrupt


def main() -> None:
    """Entry point used by both CLI script and module execution."""
    t('botapp.app.main')

    config = load_bot_config()
    setup_logging(config.paths.log_directory, production_mode=config.production_mode)

    logger = logging.getLogger('Main')
    logger.info("=" * 50)
    logger.info("Reservation & order approval bot")
    logger.info("=" * 50)

    signal.signal(signal.SIGTERM, signal_handler)

    try:
        bot = BotApplication(config)
        logger.info("🚀 Starting bot and submission API...")
        asyncio.run(bot.run_async())
    except KeyboardInterrupt:
        logger.info("✅ Stopped")
    except Exception as exc:
        logger.error("❌ Error: %s", exc, exc_info=True)
        raise
    finally:
        logger.info("🔄 Final cleanup...")
        tracking.flush()


if __name__ == '__main__':
    main()
