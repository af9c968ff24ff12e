"""
Decoder channel pool.

MAVLink decoding state (partial frame, sequence numbers, checksum) is kept
per channel. A ChannelPool hands out a limited number of channels to the
converter and to any other subsystem that needs a decoder; a channel is
owned by one user at a time and must be released when the work is done.
"""

import importlib
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from flightlog.config import CHANNEL_COUNT, MAVLINK_DIALECT
from flightlog.errors import ResourceExhausted


logger = logging.getLogger(__name__)


def load_dialect(name: str = MAVLINK_DIALECT):
    """Import a pymavlink MAVLink 2 dialect module by name."""
    return importlib.import_module(f"pymavlink.dialects.v20.{name}")


@dataclass
class DecoderContext:
    """Parsing state bound to one reserved channel."""

    channel: int
    parser: Any  # pymavlink MAVLink instance

    @classmethod
    def create(cls, channel: int, dialect=None) -> "DecoderContext":
        mavlink = dialect or load_dialect()
        parser = mavlink.MAVLink(None)
        # Report garbage as BAD_DATA instead of raising
        parser.robust_parsing = True
        return cls(channel=channel, parser=parser)


class ChannelPool:
    """
    Thread-safe pool of decoder channels.

    Channels are numbered from 1; 0 is never handed out.
    """

    def __init__(self, size: int = CHANNEL_COUNT, dialect_name: str = MAVLINK_DIALECT):
        self._size = size
        self._dialect_name = dialect_name
        self._dialect = None
        self._in_use: set[int] = set()
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        return self._size

    @property
    def in_use(self) -> int:
        with self._lock:
            return len(self._in_use)

    @property
    def available(self) -> int:
        return self._size - self.in_use

    def acquire(self) -> Optional[DecoderContext]:
        """Reserve the lowest free channel, or return None if all are taken."""
        with self._lock:
            channel = next(
                (c for c in range(1, self._size + 1) if c not in self._in_use),
                None,
            )
            if channel is None:
                return None
            self._in_use.add(channel)

        if self._dialect is None:
            self._dialect = load_dialect(self._dialect_name)
        logger.debug(f"Reserved decoder channel {channel}")
        return DecoderContext.create(channel, self._dialect)

    def release(self, context: DecoderContext) -> None:
        with self._lock:
            self._in_use.discard(context.channel)
        logger.debug(f"Released decoder channel {context.channel}")

    @contextmanager
    def reserve(self) -> Iterator[DecoderContext]:
        """Scoped reservation; the channel is released on every exit path."""
        context = self.acquire()
        if context is None:
            raise ResourceExhausted(f"No decoder channels available ({self._size} in use)")
        try:
            yield context
        finally:
            self.release(context)
