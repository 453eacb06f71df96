"""
Doorknob - conversational Discord bot with voice.

Entry point for the ``doorknob`` console script.
"""

import asyncio
import sys

from doorknob.bots.core import main


def run() -> None:
    """Run the bot until interrupted."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
