#!/usr/bin/env python3
"""
Chat Room Client - Main Entry Point

Usage:
    python main_client.py [--host HOST] [--port PORT]

Type a display name when prompted, then chat. /help lists the commands
the server understands; /quit leaves.
"""

import argparse
import asyncio
import sys

from common.constants import DEFAULT_HOST, DEFAULT_PORT


def main(argv=None):
    """Main entry point."""
    from client.chat.chat_client import ChatClient
    from client.utils.config import ClientConfig
    from client.utils.logger import logger
    
    parser = argparse.ArgumentParser(description='Chat Room Client')
    parser.add_argument('--host', type=str, default=DEFAULT_HOST,
                        help=f"Server address (default: {DEFAULT_HOST})")
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')
    args = parser.parse_args(argv)
    
    client = ChatClient(ClientConfig(args.host, args.port))
    try:
        asyncio.run(client.run())
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
    except OSError as e:
        logger.log_error("client", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
