#!/usr/bin/env python3
"""
Chat Room Server - Main Entry Point

Usage:
    python main_server.py

Optional arguments:
    --host HOST           Bind address (default: 0.0.0.0)
    --port PORT           TCP port (default: 1303)
    --read-timeout SECS   Close sessions idle for this long (default: never)
    --log-level LEVEL     Logging level (default: INFO)
"""

import argparse
import asyncio
import sys

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT, LOG_LEVEL
from server.main_server import ChatRoomServer
from server.utils.config import ServerConfig
from server.utils.logger import logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Chat Room Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--read-timeout', type=float, default=None,
                        help='Seconds a client may stay silent before it is disconnected (default: never)')
    parser.add_argument('--log-level', type=str, default=LOG_LEVEL,
                        help=f'Logging level (default: {LOG_LEVEL})')
    return parser.parse_args(argv)


async def run(config: ServerConfig):
    server = ChatRoomServer(config)
    try:
        await server.serve_forever()
    finally:
        await server.stop()


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    
    try:
        config = ServerConfig(
            host=args.host,
            port=args.port,
            read_timeout=args.read_timeout,
            log_level=args.log_level
        )
        logger.set_level(config.log_level)
    except ValueError as e:
        logger.log_error("configuration", e)
        sys.exit(2)
    
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except OSError as e:
        logger.log_error("server", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
