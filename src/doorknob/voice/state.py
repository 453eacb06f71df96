"""
Per-session voice state shared between the voice-receive thread and the
event loop.

The voice-receive library delivers packets from its own thread while gateway
events (speaking state, disconnects) arrive on the event loop, so both
structures here guard their state with a ``threading.Lock``.
"""

import threading
from typing import Dict, List, Optional


class ParticipantDirectory:
    """Thread-safe mapping from SSRC to participant id."""

    def __init__(self):
        self._participants: Dict[int, int] = {}
        self._lock = threading.Lock()

    def assign(self, ssrc: int, participant: int) -> Optional[int]:
        """
        Bind ``ssrc`` to ``participant``, replacing any earlier binding.

        Returns:
            The participant previously bound to ``ssrc``, if any
        """
        with self._lock:
            previous = self._participants.get(ssrc)
            self._participants[ssrc] = participant
            return previous

    def resolve(self, ssrc: int) -> Optional[int]:
        """Return the participant bound to ``ssrc``, or None."""
        with self._lock:
            return self._participants.get(ssrc)

    def remove_participant(self, participant: int) -> List[int]:
        """
        Drop every SSRC bound to ``participant``.

        Returns:
            The SSRCs that were removed
        """
        with self._lock:
            removed = [
                ssrc for ssrc, bound in self._participants.items() if bound == participant
            ]
            for ssrc in removed:
                del self._participants[ssrc]
            return removed

    def remove_ssrc(self, ssrc: int) -> Optional[int]:
        """Drop the binding for ``ssrc`` and return its participant."""
        with self._lock:
            return self._participants.pop(ssrc, None)

    def ssrcs(self) -> List[int]:
        """Snapshot of the known SSRCs."""
        with self._lock:
            return list(self._participants)

    def snapshot(self) -> Dict[int, int]:
        """Copy of the whole mapping."""
        with self._lock:
            return dict(self._participants)

    def __len__(self) -> int:
        with self._lock:
            return len(self._participants)

    def __contains__(self, ssrc: int) -> bool:
        with self._lock:
            return ssrc in self._participants


class TickAggregator:
    """Remembers whether the previous tick had no active speakers."""

    def __init__(self):
        self._silent = False
        self._lock = threading.Lock()

    @property
    def silent(self) -> bool:
        with self._lock:
            return self._silent

    def mark_silent(self) -> bool:
        """
        Record a tick without speakers.

        Returns:
            True only on the transition from active to silent
        """
        with self._lock:
            if self._silent:
                return False
            self._silent = True
            return True

    def mark_active(self) -> bool:
        """
        Record a tick with at least one speaker.

        Returns:
            Whether the previous tick was silent
        """
        with self._lock:
            was_silent = self._silent
            self._silent = False
            return was_silent
