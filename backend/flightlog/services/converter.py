"""
Telemetry log to GUTMA flight log conversion.

A .tlog file is laid out as

    timestamp [frame timestamp]*

where each timestamp is 8 bytes and each frame is one MAVLink packet. The
timestamp read after a frame is the arrival time of the *next* frame, so
each frame is stamped with the value read before it.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from flightlog.errors import (
    ConversionError,
    DestinationCreateFailed,
    ResourceExhausted,
    SourceOpenFailed,
)
from flightlog.models.track import RunState, Track
from flightlog.services.channels import ChannelPool, DecoderContext
from flightlog.services.document_writer import write_document
from flightlog.services.frame_scanner import FrameScanner
from flightlog.services.interpreter import MessageInterpreter
from flightlog.services.track_builder import append_sample
from flightlog.utils.timestamps import read_timestamp


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class UTMConverter:
    """
    Converts telemetry logs using channels from a shared pool.

    A converter runs one conversion at a time. The state of the last run
    stays available through `state` and `track`.
    """

    def __init__(
        self,
        pool: ChannelPool,
        interpreter: Optional[MessageInterpreter] = None,
        now_us: Optional[int] = None,
    ):
        self._pool = pool
        self._interpreter = interpreter or MessageInterpreter()
        self._now_us = now_us
        self._context: Optional[DecoderContext] = None
        self.state: Optional[RunState] = None
        self.scanner: Optional[FrameScanner] = None
        self.last_error: Optional[ConversionError] = None

    def __del__(self):
        self.close()

    @property
    def track(self) -> Track:
        return self.state.track if self.state is not None else Track()

    def close(self) -> None:
        """Give back the decoder channel if one is still held."""
        context = getattr(self, "_context", None)
        if context is not None:
            self._context = None
            self._pool.release(context)

    def convert_telemetry_file(self, source: PathLike, dest: PathLike) -> bool:
        """
        Convert source into a flight logging document at dest.

        An empty track is not a failure: the destination is removed and
        the call still succeeds.

        Returns:
            False if no channel was free or either file could not be opened;
            the reason is kept in `last_error`
        """
        self.last_error = None
        try:
            return self._convert(Path(source), Path(dest))
        except ConversionError as e:
            self.last_error = e
            logger.warning(str(e))
            return False
        except Exception:
            logger.exception(f"Conversion of {source} failed")
            return False
        finally:
            self.close()

    def _convert(self, source: Path, dest: Path) -> bool:
        self._context = self._pool.acquire()
        if self._context is None:
            raise ResourceExhausted("No mavlink channels available")

        try:
            src = open(source, "rb")
        except OSError as e:
            raise SourceOpenFailed(f"Unable to open log file: '{source}', error: {e}") from e

        with src:
            if dest.resolve() == source.resolve():
                raise DestinationCreateFailed(f"Refusing to overwrite the log file with its UTM file: '{dest}'")
            try:
                out = open(dest, "w", encoding="utf-8")
            except OSError as e:
                raise DestinationCreateFailed(f"Unable to create UTM file: '{dest}', error: {e}") from e

            try:
                with out:
                    state = self._parse(src)
                    if len(state.track):
                        write_document(out, state.track, state.start_time_us, dest)
            except Exception:
                dest.unlink(missing_ok=True)
                raise

        if not len(state.track):
            logger.info(f"No position samples in {source.name}, removing {dest.name}")
            dest.unlink(missing_ok=True)
        else:
            position_messages = ", ".join(
                name for seen, name in (
                    (state.has_global_position, "GLOBAL_POSITION_INT"),
                    (state.has_gps_raw, "GPS_RAW_INT"),
                ) if seen
            )
            logger.info(
                f"Converted {source.name}: {self.scanner.frame_count} frames, "
                f"{len(state.track)} samples from {position_messages}, "
                f"{self.scanner.bad_data_count} bad data chunks"
            )
        return True

    def _parse(self, src) -> RunState:
        self.state = state = RunState()
        self.scanner = scanner = FrameScanner(self._now_us)

        initial = read_timestamp(src, self._now_us)
        if initial is None:
            return state
        state.current_time_us = initial

        while True:
            result = scanner.next_frame(src, self._context)
            if result is None:
                break
            message, next_time_us = result
            sample = self._interpreter.apply(state, state.current_time_us, message)
            if sample is not None:
                append_sample(state.track, sample)
            state.current_time_us = next_time_us
        return state


def convert_telemetry_file(
    source: PathLike,
    dest: PathLike,
    pool: Optional[ChannelPool] = None,
) -> bool:
    """One-shot conversion; uses a private single-channel pool unless one is given."""
    converter = UTMConverter(pool if pool is not None else ChannelPool(size=1))
    return converter.convert_telemetry_file(source, dest)
