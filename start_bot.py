#!/usr/bin/env python3
"""
Startup script for the Doorknob bot.

Runs the bot from a source checkout without installing the package.
"""

import asyncio
import sys
from pathlib import Path

# Ensure src directory is in Python path for direct execution
src_path = Path(__file__).resolve().parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from doorknob.bots.core import main  # noqa: E402
from doorknob.infrastructure import get_logger  # noqa: E402

logger = get_logger("doorknob.startup")


async def startup():
    """Startup function with error handling."""
    env_file = Path(".env")
    if not env_file.exists():
        logger.warning("No .env file found!")

    await main()


if __name__ == "__main__":
    try:
        asyncio.run(startup())
    except KeyboardInterrupt:
        print("\nBot shutdown requested")
