"""
Shared constants for the chat room service.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 1303

# Line framing
ENCODING = 'utf-8'
LINE_TERMINATOR = '\n'
MAX_LINE_LENGTH = 64 * 1024  # bytes accepted per line before the session is dropped

# Sessions
INBOUND_QUEUE_SIZE = 64
OUTBOUND_QUEUE_SIZE = 256  # lines waiting for a slow reader before it is dropped
FLUSH_TIMEOUT = 1.0  # seconds allowed to flush the last lines on close
DEFAULT_READ_TIMEOUT = None  # seconds; None waits forever

# Logging
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


# Commands a client can issue once its username is accepted
class Commands:
    HELP = '/help'
    DURATION = '/duration'
    SINCE = '/since'
    IP = '/ip'
    USERCOUNT = '/usercount'
    USERLIST = '/userlist'
    QUIT = '/quit'


# Command descriptions, in the order /help lists them
COMMAND_HELP = (
    (Commands.HELP, 'List all possible commands'),
    (Commands.DURATION, 'Display amount of time server has been running'),
    (Commands.SINCE, 'Display amount of time since user connected'),
    (Commands.IP, 'Display IP address of server'),
    (Commands.USERCOUNT, 'Display number of users currently in server'),
    (Commands.USERLIST, 'List of all users currently in server'),
    (Commands.QUIT, 'Disconnect from server'),
)

# Fixed protocol lines
JOIN_PROMPT = 'Please enter a unique display name for the chat room'
NAME_IN_USE = 'Username already in use, please try again'
HELP_HINT = 'Type /help to see a list of possible commands'
HELP_HEADER = 'List of commands:'
