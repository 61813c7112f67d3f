"""
Command-line entry point.

Usage:
    python -m chirpy [--debug] [--host HOST] [--port PORT]

``--debug`` starts with an empty database file.
"""
from __future__ import annotations

import argparse
import logging

import uvicorn

from chirpy.app import create_app
from chirpy.core.config import get_settings


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="chirpy", description="Run the Chirpy API server.")
    parser.add_argument("--debug", action="store_true", help="wipe the database before starting")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings, reset_database=args.debug or settings.reset_database)
    logging.getLogger("chirpy").info("Serving on port: %s", args.port)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
