"""
MAVLink frame scanner for timestamped telemetry logs.

Bytes are fed one at a time into the channel's pymavlink parser. Corrupt
input never raises: pymavlink reports it as BAD_DATA, which is dropped, and
the parser resynchronizes on the next start-of-frame marker. Each complete
frame is paired with the 8-byte timestamp token that follows it.
"""

import logging
from typing import Any, BinaryIO, Optional

from flightlog.services.channels import DecoderContext
from flightlog.utils.timestamps import read_timestamp


logger = logging.getLogger(__name__)

BAD_DATA = "BAD_DATA"


class FrameScanner:
    """Pulls (message, timestamp) pairs out of a log stream."""

    def __init__(self, now_us: Optional[int] = None):
        self._now_us = now_us
        self.frame_count = 0
        self.bad_data_count = 0

    def next_frame(
        self,
        stream: BinaryIO,
        context: DecoderContext,
    ) -> Optional[tuple[Any, int]]:
        """
        Scan forward to the next valid frame.

        Returns:
            (message, timestamp_us) for the frame, or None at end of stream
        """
        parser = context.parser
        while True:
            byte = stream.read(1)
            if not byte:
                return None

            message = parser.parse_char(byte)
            if message is None:
                continue
            if message.get_type() == BAD_DATA:
                self.bad_data_count += 1
                continue

            timestamp = read_timestamp(stream, self._now_us)
            if timestamp is None:
                logger.debug(f"Log ends inside the timestamp after {message.get_type()}")
                return None
            self.frame_count += 1
            return message, timestamp
