"""
GUTMA flight logging document output.

The document is rendered from fixed text templates so the layout matches
what the exchange service expects line for line.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TextIO

from flightlog.models.track import TRACK_KEYS, Track, TrackSample


LOGGING_HEADER = """{
    "exchange": {
        "exchange_type": "flight_logging",
        "message": {
            "flight_logging": {
                "flight_logging_items": [
"""

LOGGING_KEYS = """                ],
                "flight_logging_keys": [
                    %s
                ],
                "altitude_system": "WGS84",
""" % ", ".join(f'"{key}"' for key in TRACK_KEYS)

LOGGING_START = """                "logging_start_dtg": "{start}Z"
"""

LOGGING_FOOTER = """            }},
            "file": {{
                "logging_type": "GUTMA_DX_JSON",
                "filename": "{filename}",
                "creation_dtg": "{created}Z"
            }},
            "message_type": "flight_logging_submission"
        }}
    }}
}}
"""

ITEM_LINE = "                    [{:.3f}, {:.6f}, {:.6f}, {:.6f}, {:.3f}]"


def format_dtg(value: datetime) -> str:
    """ISO 8601 in UTC at seconds resolution, without offset."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")


def usecs_to_datetime(timestamp_us: int) -> datetime:
    return datetime.fromtimestamp(timestamp_us / 1_000_000, tz=timezone.utc)


def document_filename(dest_path: Path) -> str:
    """Destination name up to its first dot."""
    return Path(dest_path).name.split(".")[0]


def format_item(sample: TrackSample) -> str:
    return ITEM_LINE.format(sample.elapsed_s, sample.lon, sample.lat, sample.alt, sample.speed)


def render_document(
    track: Track,
    start_time_us: int,
    filename: str,
    created: Optional[datetime] = None,
) -> str:
    if created is None:
        created = datetime.now(timezone.utc)

    items = ",\n".join(format_item(sample) for sample in track)
    return (
        LOGGING_HEADER
        + items + "\n"
        + LOGGING_KEYS
        + LOGGING_START.format(start=format_dtg(usecs_to_datetime(start_time_us)))
        + LOGGING_FOOTER.format(filename=filename, created=format_dtg(created))
    )


def write_document(
    out: TextIO,
    track: Track,
    start_time_us: int,
    dest_path: Path,
    created: Optional[datetime] = None,
) -> None:
    """Write the document for track to an open text stream."""
    out.write(render_document(track, start_time_us, document_filename(dest_path), created))
