"""
Diagnostic sink for signing traffic

The signature wire records what was signed (the canonical string) and what
came out (the signature). Entries go into a bounded buffer that never
blocks the signing path: when the buffer is full new entries are dropped
and counted.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List

SIGNATURE_LOGGER_NAME = "atmos_sdk.signature"

signature_logger = logging.getLogger(SIGNATURE_LOGGER_NAME)


class WireDirection(str, Enum):
    """Direction of a wire entry"""
    OUTPUT = "output"
    INPUT = "input"


@dataclass(frozen=True)
class WireEntry:
    """
    One recorded wire event

    Attributes:
        direction: OUTPUT for a canonical string, INPUT for a signature
        text: Recorded text, unmodified
    """
    direction: WireDirection
    text: str


class SignatureWire:
    """Bounded, non-blocking recorder for canonical strings and signatures."""

    def __init__(self, enabled: bool = False, max_entries: int = 1000):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._enabled = enabled
        self._entries: "queue.Queue[WireEntry]" = queue.Queue(maxsize=max_entries)
        self._dropped = 0
        self._lock = threading.Lock()

    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    @property
    def dropped(self) -> int:
        """Number of entries discarded because the buffer was full."""
        return self._dropped

    def output(self, text: str) -> None:
        """Record the canonical string that is about to be signed."""
        self._record(WireDirection.OUTPUT, text)

    def input(self, text: str) -> None:
        """Record the signature produced for the last canonical string."""
        self._record(WireDirection.INPUT, text)

    def drain(self) -> List[WireEntry]:
        """Remove and return every buffered entry, oldest first."""
        entries = []
        while True:
            try:
                entries.append(self._entries.get_nowait())
            except queue.Empty:
                return entries

    def _record(self, direction: WireDirection, text: str) -> None:
        if not self._enabled:
            return

        signature_logger.debug(f"{direction.value}: {text!r}")
        try:
            self._entries.put_nowait(WireEntry(direction, text))
        except queue.Full:
            with self._lock:
                self._dropped += 1
