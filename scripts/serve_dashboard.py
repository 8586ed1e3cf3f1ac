#!/usr/bin/env python3
"""
Serve the governance monitor API.
Usage: python scripts/serve_dashboard.py [--host HOST] [--port PORT] [--reload]
"""

import argparse
import sys
from pathlib import Path

import uvicorn

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from config.settings_schema import configure_logging  # noqa: E402
from dashboard.formatting import apply_user_locale  # noqa: E402

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def main(argv=None):
    parser = argparse.ArgumentParser(description="Governance monitor dashboard API")
    parser.add_argument("--host", default=DEFAULT_HOST, help=f"Bind address (default: {DEFAULT_HOST})")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Port number (default: {DEFAULT_PORT})")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")

    args = parser.parse_args(argv)

    settings = configure_logging()
    apply_user_locale()
    print(f"Governance monitor on http://{args.host}:{args.port} (proxy: {settings.proxy.url})")
    uvicorn.run(
        "web.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
