"""
Helpers for fitting replies into Discord messages.
"""

from typing import List

from doorknob.core.types import MESSAGE_CHAR_LIMIT


def split_message(text: str, limit: int = MESSAGE_CHAR_LIMIT) -> List[str]:
    """
    Split ``text`` into chunks of at most ``limit`` characters.

    Chunks end at the last newline (or, failing that, the last space) that
    fits; a word longer than ``limit`` is cut. The separator at a split point
    is dropped. Empty text yields no chunks.
    """
    chunks = []
    remaining = text
    while len(remaining) > limit:
        cut = remaining.rfind("\n", 0, limit + 1)
        if cut <= 0:
            cut = remaining.rfind(" ", 0, limit + 1)
        if cut <= 0:
            cut = limit

        chunks.append(remaining[:cut])
        remaining = remaining[cut:]
        if remaining[:1] in ("\n", " "):
            remaining = remaining[1:]

    if remaining:
        chunks.append(remaining)
    return chunks
