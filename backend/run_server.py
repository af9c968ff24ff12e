#!/usr/bin/env python3
"""
Launch script for Flight Log Exchange Backend.

Usage:
    python run_server.py [data_folder] [--port PORT] [--host HOST]

Examples:
    python run_server.py                    # Use default ./data/logs folder
    python run_server.py /path/to/tlogs     # Use custom folder
    python run_server.py --port 5000        # Run on port 5000
"""

import argparse
import os
import sys
from pathlib import Path

# Add flightlog to path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    parser = argparse.ArgumentParser(description="Flight Log Exchange Backend Server")
    parser.add_argument(
        "data_folder",
        nargs="?",
        default="./data/logs",
        help="Folder that relative log paths resolve against (default: ./data/logs)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)"
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Run in debug mode"
    )

    args = parser.parse_args()

    data_folder = Path(args.data_folder)

    print("Flight Log Exchange Backend")
    print("=" * 40)
    print(f"Data folder: {data_folder.absolute()}")
    print(f"Server: http://{args.host}:{args.port}")
    print("=" * 40)

    if not data_folder.exists():
        print(f"\nWarning: Data folder does not exist: {data_folder}")

    # Picked up by the FastAPI lifespan handler
    os.environ["FLIGHTLOG_DATA_FOLDER"] = str(data_folder)

    print("\nAPI Endpoints:")
    print("  GET  /                 - Health check")
    print("  GET  /health           - Detailed health")
    print("  POST /convert          - Convert a .tlog file")
    print("  GET  /channels         - Decoder channel usage")
    print("  GET  /documents/{name} - Read a converted document")
    print("\nStarting server...")

    import uvicorn

    uvicorn.run(
        "flightlog.main:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()
