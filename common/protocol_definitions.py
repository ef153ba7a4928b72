"""
Protocol definitions for the chat room service.

Every line the server sends is plain text; this module holds the data
structures shared by the server components and the builders that format
each reply and announcement.
"""

import enum
from typing import Iterable, List

from common.constants import COMMAND_HELP, HELP_HEADER


class SessionState(enum.Enum):
    """Lifecycle of a connected client."""
    NEGOTIATING = 'negotiating'
    ACTIVE = 'active'
    TERMINATED = 'terminated'


# Announcements (broadcast to every active session)

def create_join_announcement(username: str) -> str:
    return f"{username} has connected"


def create_leave_announcement(username: str) -> str:
    return f"{username} has disconnected"


def create_chat_line(username: str, text: str) -> str:
    return f"{username}: {text}"


# Private replies

def create_help_lines() -> List[str]:
    """Header followed by one line per command."""
    return [HELP_HEADER] + [f"{command}: {description}" for command, description in COMMAND_HELP]


def create_duration_reply(seconds: int) -> str:
    return f"Server has been running for {seconds} seconds"


def create_since_reply(seconds: int) -> str:
    return f"Client has been in server for {seconds} seconds"


def create_ip_reply(address: str) -> str:
    return f"IP address of the server is {address}"


def create_usercount_reply(count: int) -> str:
    return f"There are currently {count} users connected"


def create_userlist_reply(usernames: Iterable[str]) -> str:
    return "List of users: " + ", ".join(usernames)
