"""
Flight track data model.

A track is the time-ordered list of position samples folded out of a
telemetry log. Samples are appended in chronological order and no two
adjacent samples carry the same position and speed.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from flightlog.utils.coordinates import haversine_distance


# Column order of the exported flight_logging_items rows
TRACK_KEYS = ("timestamp", "gps_lon", "gps_lat", "gps_altitude", "speed")


@dataclass
class TrackSample:
    """Single position sample."""

    elapsed_s: float   # Seconds since the first frame of the log
    lon: float         # degrees
    lat: float         # degrees
    alt: float         # meters
    speed: float       # m/s, ground speed

    def same_position(self, other: "TrackSample") -> bool:
        """True when position and speed match, ignoring time."""
        return (
            self.lon == other.lon
            and self.lat == other.lat
            and self.alt == other.alt
            and self.speed == other.speed
        )


@dataclass
class Track:
    """Ordered sequence of samples for one conversion run."""

    samples: list[TrackSample] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self):
        return iter(self.samples)

    @property
    def last(self) -> Optional[TrackSample]:
        return self.samples[-1] if self.samples else None

    def to_array(self) -> NDArray[np.float64]:
        """Samples as an (n, 5) array in TRACK_KEYS column order."""
        if not self.samples:
            return np.empty((0, len(TRACK_KEYS)), dtype=np.float64)
        return np.array(
            [(s.elapsed_s, s.lon, s.lat, s.alt, s.speed) for s in self.samples],
            dtype=np.float64,
        )

    def get_time_range(self) -> tuple[float, float]:
        if not self.samples:
            return (0.0, 0.0)
        return (self.samples[0].elapsed_s, self.samples[-1].elapsed_s)

    def get_bounding_box(self) -> tuple[float, float, float, float]:
        """(min_lon, min_lat, max_lon, max_lat)"""
        data = self.to_array()
        if len(data) == 0:
            return (0.0, 0.0, 0.0, 0.0)
        return (
            float(np.min(data[:, 1])),
            float(np.min(data[:, 2])),
            float(np.max(data[:, 1])),
            float(np.max(data[:, 2])),
        )

    def distance_m(self) -> float:
        """Great-circle length of the track."""
        data = self.to_array()
        if len(data) < 2:
            return 0.0
        legs = haversine_distance(data[:-1, 2], data[:-1, 1], data[1:, 2], data[1:, 1])
        return float(np.sum(legs))


@dataclass
class RunState:
    """
    Mutable state of a single conversion run.

    start_time_us stays None until the first frame is seen; that frame's
    timestamp becomes the time origin of the track.
    """

    current_time_us: int = 0
    start_time_us: Optional[int] = None
    last_speed: float = 0.0
    has_gps_raw: bool = False
    has_global_position: bool = False
    track: Track = field(default_factory=Track)

    def elapsed_s(self, timestamp_us: int) -> float:
        if self.start_time_us is None:
            return 0.0
        return max(timestamp_us - self.start_time_us, 0) / 1_000_000.0
