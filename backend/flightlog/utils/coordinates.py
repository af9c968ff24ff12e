"""
Geodesy helpers for track summaries.

Positions stay in WGS84 degrees; only distances are derived here.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray


EARTH_RADIUS_M = 6371000  # Earth's mean radius in meters

# Fixed-point scales used by MAVLink position messages
DEGE7 = 1e7   # degrees * 1e7
MM_PER_M = 1000.0


def scale_degrees(value: int) -> float:
    """Convert a degE7 integer to degrees."""
    return value / DEGE7


def scale_millimeters(value: int) -> float:
    """Convert millimeters to meters."""
    return value / MM_PER_M


def haversine_distance(
    lat1: ArrayLike,
    lon1: ArrayLike,
    lat2: ArrayLike,
    lon2: ArrayLike,
) -> NDArray[np.float64]:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in meters (array-shaped when given arrays)
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    dlat = np.radians(np.subtract(lat2, lat1))
    dlon = np.radians(np.subtract(lon2, lon1))

    a = np.sin(dlat/2)**2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon/2)**2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1-a))

    return EARTH_RADIUS_M * c
