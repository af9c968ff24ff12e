"""
Turns decoded MAVLink messages into track samples.

Position comes from one of two sources:
- GLOBAL_POSITION_INT, the autopilot's fused estimate
- GPS_RAW_INT, the receiver's raw fix, used only until the first fused
  position shows up in the log

VFR_HUD carries the ground speed attached to later samples.
"""

import logging
import math
from typing import Any, Optional

from pymavlink.dialects.v20 import common as mavlink

from flightlog.config import LEGACY_RAW_FIX_LON
from flightlog.models.track import RunState, TrackSample
from flightlog.utils.coordinates import scale_degrees, scale_millimeters


logger = logging.getLogger(__name__)

MSG_ID_GPS_RAW_INT = mavlink.MAVLINK_MSG_ID_GPS_RAW_INT
MSG_ID_GLOBAL_POSITION_INT = mavlink.MAVLINK_MSG_ID_GLOBAL_POSITION_INT
MSG_ID_VFR_HUD = mavlink.MAVLINK_MSG_ID_VFR_HUD

MIN_FIX_TYPE = mavlink.GPS_FIX_TYPE_3D_FIX


class MessageInterpreter:
    """
    Dispatches messages by id and updates the run state.

    Args:
        legacy_raw_fix_lon: Write the raw fix latitude into the longitude
            field, matching output produced by older converters.
    """

    def __init__(self, legacy_raw_fix_lon: bool = LEGACY_RAW_FIX_LON):
        self.legacy_raw_fix_lon = legacy_raw_fix_lon
        self._handlers = {
            MSG_ID_GPS_RAW_INT: self._handle_gps_raw_int,
            MSG_ID_GLOBAL_POSITION_INT: self._handle_global_position_int,
            MSG_ID_VFR_HUD: self._handle_vfr_hud,
        }

    def apply(self, state: RunState, timestamp_us: int, message: Any) -> Optional[TrackSample]:
        """Apply one message stamped with timestamp_us; return a sample if it yields one."""
        if state.start_time_us is None:
            state.start_time_us = timestamp_us

        handler = self._handlers.get(message.get_msgId())
        if handler is None:
            return None
        return handler(state, timestamp_us, message)

    def _handle_gps_raw_int(self, state: RunState, timestamp_us: int, message: Any) -> Optional[TrackSample]:
        state.has_gps_raw = True
        if state.has_global_position:
            return None
        if message.fix_type < MIN_FIX_TYPE:
            return None

        lat = scale_degrees(message.lat)
        lon = lat if self.legacy_raw_fix_lon else scale_degrees(message.lon)
        return TrackSample(
            elapsed_s=state.elapsed_s(timestamp_us),
            lon=lon,
            lat=lat,
            alt=scale_millimeters(message.alt),
            speed=state.last_speed,
        )

    def _handle_global_position_int(self, state: RunState, timestamp_us: int, message: Any) -> TrackSample:
        if not state.has_global_position:
            logger.debug("Fused position available, ignoring raw GPS fixes from here on")
        state.has_global_position = True
        return TrackSample(
            elapsed_s=state.elapsed_s(timestamp_us),
            lon=scale_degrees(message.lon),
            lat=scale_degrees(message.lat),
            alt=scale_millimeters(message.alt),
            speed=state.last_speed,
        )

    def _handle_vfr_hud(self, state: RunState, timestamp_us: int, message: Any) -> None:
        groundspeed = float(message.groundspeed)
        state.last_speed = 0.0 if math.isnan(groundspeed) else groundspeed
        return None
