"""
Command dispatcher module.

Classifies each line an active session sends as a command or a chat
message and carries out the result.
"""

import time
from typing import Callable

from common.constants import Commands
from common.protocol_definitions import (
    SessionState, create_chat_line, create_help_lines, create_duration_reply,
    create_since_reply, create_ip_reply, create_usercount_reply, create_userlist_reply
)
from server.chat.broadcaster import Broadcaster
from server.chat.registry import SessionRegistry
from server.utils.logger import logger


class CommandDispatcher:
    """Maps client input to replies, broadcasts or disconnects."""
    
    def __init__(self, registry: SessionRegistry, broadcaster: Broadcaster, open_time: float,
                 host_address: str, clock: Callable[[], float] = time.time):
        self.registry = registry
        self.broadcaster = broadcaster
        self.open_time = open_time
        self.host_address = host_address
        self.clock = clock
        
        # Matched against the whole line; anything else is chat
        self.commands = {
            Commands.HELP: self.handle_help,
            Commands.DURATION: self.handle_duration,
            Commands.SINCE: self.handle_since,
            Commands.IP: self.handle_ip,
            Commands.USERCOUNT: self.handle_usercount,
            Commands.USERLIST: self.handle_userlist,
            Commands.QUIT: self.handle_quit,
        }
    
    async def dispatch(self, session, line: str) -> bool:
        """
        Handle one line from an active session.
        Returns False once the session has terminated and should stop reading.
        """
        handler = self.commands.get(line)
        if handler is not None:
            logger.log_command(session.username, session.uid, line)
            await handler(session)
        elif line:
            await self.broadcaster.broadcast(create_chat_line(session.username, line))
        
        return session.state is SessionState.ACTIVE
    
    def _elapsed(self, since: float) -> int:
        return max(0, int(self.clock() - since))
    
    async def handle_help(self, session):
        await session.send_lines(create_help_lines())
    
    async def handle_duration(self, session):
        await session.send(create_duration_reply(self._elapsed(self.open_time)))
    
    async def handle_since(self, session):
        await session.send(create_since_reply(self._elapsed(session.joined_at)))
    
    async def handle_ip(self, session):
        await session.send(create_ip_reply(self.host_address))
    
    async def handle_usercount(self, session):
        await session.send(create_usercount_reply(await self.registry.count()))
    
    async def handle_userlist(self, session):
        await session.send(create_userlist_reply(await self.registry.username_list()))
    
    async def handle_quit(self, session):
        await session.terminate()
