"""
Command line converter.

Usage:
    flightlog-convert flight.tlog                 # writes flight.json
    flightlog-convert flight.tlog out/flight.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from flightlog.services.channels import ChannelPool
from flightlog.services.converter import UTMConverter


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Convert a MAVLink telemetry log into a GUTMA flight logging document"
    )
    parser.add_argument("source", type=Path, help="Path to the .tlog file")
    parser.add_argument(
        "dest",
        type=Path,
        nargs="?",
        default=None,
        help="Output document (default: source with .json suffix)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every appended sample"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    dest = args.dest if args.dest is not None else args.source.with_suffix(".json")
    if dest.resolve() == args.source.resolve():
        print(f"{dest}: refusing to overwrite the log file, give a different destination", file=sys.stderr)
        return 1

    converter = UTMConverter(ChannelPool(size=1))
    if not converter.convert_telemetry_file(args.source, dest):
        return 1

    track = converter.track
    if len(track):
        start, end = track.get_time_range()
        print(f"{dest}: {len(track)} samples, {end - start:.1f} s, {track.distance_m():.0f} m")
    else:
        print(f"{args.source}: no position samples, nothing written")
    return 0


if __name__ == "__main__":
    sys.exit(main())
