"""
Track accumulation with dead time suppression.
"""

import logging

from flightlog.models.track import Track, TrackSample


logger = logging.getLogger(__name__)


def append_sample(track: Track, sample: TrackSample) -> bool:
    """
    Append sample unless it repeats the last one.

    Time is not compared, so idle stretches of identical telemetry collapse
    into their first sample.

    Returns:
        True if the sample was appended
    """
    last = track.last
    if last is not None and last.same_position(sample):
        return False
    track.samples.append(sample)
    logger.debug(f"Appended sample at {sample.elapsed_s:.3f}s")
    return True
