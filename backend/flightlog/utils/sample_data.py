"""
Sample data generator for testing.

Builds timestamped MAVLink telemetry logs (.tlog) with pymavlink.
"""

import math
from pathlib import Path
from typing import Any, Iterable, Optional

import numpy as np
from pymavlink.dialects.v20 import common as mavlink

from flightlog.utils.timestamps import encode_timestamp


DEFAULT_START_US = 1_700_000_000_000_000  # 2023-11-14T22:13:20Z


def new_link(system_id: int = 1, component_id: int = 1) -> Any:
    """MAVLink instance used only to pack outgoing messages."""
    return mavlink.MAVLink(None, srcSystem=system_id, srcComponent=component_id)


def gps_raw_int(mav: Any, lat: int, lon: int, alt: int, fix_type: int = mavlink.GPS_FIX_TYPE_3D_FIX) -> bytes:
    msg = mav.gps_raw_int_encode(0, fix_type, lat, lon, alt, 65535, 65535, 0, 0, 10)
    return msg.pack(mav)


def global_position_int(mav: Any, lat: int, lon: int, alt: int, relative_alt: int = 0) -> bytes:
    msg = mav.global_position_int_encode(0, lat, lon, alt, relative_alt, 0, 0, 0, 0)
    return msg.pack(mav)


def vfr_hud(mav: Any, groundspeed: float, airspeed: float = 0.0) -> bytes:
    msg = mav.vfr_hud_encode(airspeed, groundspeed, 0, 0, 0.0, 0.0)
    return msg.pack(mav)


def heartbeat(mav: Any) -> bytes:
    msg = mav.heartbeat_encode(
        mavlink.MAV_TYPE_QUADROTOR,
        mavlink.MAV_AUTOPILOT_PX4,
        0,
        0,
        mavlink.MAV_STATE_ACTIVE,
    )
    return msg.pack(mav)


def _timestamp(time_us: int, little_endian: bool) -> bytes:
    token = encode_timestamp(time_us)
    return token[::-1] if little_endian else token


def build_tlog(
    frames: Iterable[tuple[int, bytes]],
    end_time_us: Optional[int] = None,
    little_endian: bool = False,
) -> bytes:
    """
    Lay out (time_us, frame) pairs as a log.

    Each frame is preceded by its own timestamp; the log ends with a
    trailing timestamp (end_time_us, or the last frame time).
    """
    out = bytearray()
    last_time_us = None
    for time_us, frame in frames:
        out += _timestamp(time_us, little_endian)
        out += frame
        last_time_us = time_us
    if last_time_us is not None:
        out += _timestamp(end_time_us if end_time_us is not None else last_time_us, little_endian)
    return bytes(out)


def write_tlog(
    output_path: Path,
    frames: Iterable[tuple[int, bytes]],
    end_time_us: Optional[int] = None,
    little_endian: bool = False,
) -> Path:
    output_path = Path(output_path)
    output_path.write_bytes(build_tlog(frames, end_time_us, little_endian))
    return output_path


def generate_circuit_flight(
    output_path: Path,
    duration_s: float = 60.0,
    sample_rate_hz: float = 5.0,
    center_lat: float = 37.7749,
    center_lon: float = -122.4194,
    radius_m: float = 50.0,
    altitude_m: float = 30.0,
    start_us: int = DEFAULT_START_US,
) -> Path:
    """
    Generate a circular flight around a center point.

    Each step logs a VFR_HUD with the ground speed followed by a
    GLOBAL_POSITION_INT, plus a heartbeat once per second.
    """
    mav = new_link()
    n_samples = int(duration_s * sample_rate_hz)
    timestamps = np.linspace(0, duration_s, n_samples)

    angle = timestamps / duration_s * 2 * np.pi
    north_m = radius_m * np.cos(angle)
    east_m = radius_m * np.sin(angle)

    lat = center_lat + np.degrees(north_m / 6371000.0)
    lon = center_lon + np.degrees(east_m / (6371000.0 * math.cos(math.radians(center_lat))))
    speed = 2 * np.pi * radius_m / duration_s

    frames = []
    step_us = int(1_000_000 / sample_rate_hz)
    for i, t in enumerate(timestamps):
        time_us = start_us + int(t * 1_000_000)
        if i % max(int(sample_rate_hz), 1) == 0:
            frames.append((time_us, heartbeat(mav)))
        frames.append((time_us, vfr_hud(mav, speed)))
        frames.append((
            time_us + step_us // 2,
            global_position_int(mav, int(round(lat[i] * 1e7)), int(round(lon[i] * 1e7)), int(altitude_m * 1000)),
        ))

    return write_tlog(output_path, frames)
