#!/usr/bin/env python3
"""
Planner API server.

Serves the HTTP API with uvicorn using settings from the environment
(or a .env file), optionally overridden on the command line.
"""

import argparse
import logging
from pathlib import Path

import uvicorn

from api.main import configure_logging, create_app
from planner.config import load_config

logger = logging.getLogger(__name__)


def main():
    config = load_config()

    parser = argparse.ArgumentParser(description="Run the Planner API server")
    parser.add_argument("--host", default=config.server.host, help="Bind address")
    parser.add_argument("--port", "-p", type=int, default=config.server.port, help="Bind port")
    parser.add_argument("--data-dir", help="Directory holding the JSON collections")
    parser.add_argument("--log-level", default=config.server.log_level, help="Logging level")
    args = parser.parse_args()

    if args.data_dir:
        config.storage.data_dir = Path(args.data_dir)

    configure_logging(args.log_level)
    app = create_app(config)

    logger.info(f"Listening on {args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
