"""
Chat Room Server - Listener

Accepts TCP connections and runs one Session per client against a single
shared SessionRegistry.
"""

import asyncio
import socket
import time
from typing import Callable, Dict, Optional

from server.chat.broadcaster import Broadcaster
from server.chat.dispatcher import CommandDispatcher
from server.chat.registry import SessionRegistry
from server.chat.session import Session
from server.chat.transport import LineTransport
from server.utils.config import ServerConfig
from server.utils.logger import logger


def resolve_host_address() -> str:
    """Host name and resolved address of this machine, as 'name/address'."""
    hostname = socket.gethostname()
    try:
        address = socket.gethostbyname(hostname)
    except OSError:
        address = '127.0.0.1'
    return f"{hostname}/{address}"


class ChatRoomServer:
    """Main server class that ties the chat components together."""
    
    def __init__(self, config: Optional[ServerConfig] = None, clock: Callable[[], float] = time.time,
                 host_address: Optional[str] = None):
        self.config = config or ServerConfig()
        self.clock = clock
        self.open_time = clock()
        
        self.registry = SessionRegistry()
        self.broadcaster = Broadcaster(self.registry)
        self.dispatcher = CommandDispatcher(
            self.registry, self.broadcaster, self.open_time,
            host_address or resolve_host_address(), clock
        )
        
        # Every open connection, negotiating or active
        self.sessions: Dict[int, Session] = {}
        self.next_uid = 1
        self.server: Optional[asyncio.AbstractServer] = None
    
    def get_next_uid(self) -> int:
        """Get the next available UID."""
        uid = self.next_uid
        self.next_uid += 1
        return uid
    
    @property
    def port(self) -> Optional[int]:
        """Port actually bound, useful when configured with port 0."""
        if self.server is None or not self.server.sockets:
            return None
        return self.server.sockets[0].getsockname()[1]
    
    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle individual client connection."""
        uid = self.get_next_uid()
        transport = LineTransport(reader, writer)
        logger.log_connection(transport.peername, uid)
        
        session = Session(uid, transport, self.registry, self.broadcaster, self.dispatcher,
                          self.config, self.clock)
        self.sessions[uid] = session
        try:
            await session.run()
        except asyncio.CancelledError:
            logger.info(f"Connection cancelled for uid={uid}")
            raise
        except Exception as e:
            logger.log_error(f"session uid={uid}", e)
        finally:
            self.sessions.pop(uid, None)
    
    async def start(self):
        """Bind the listening socket."""
        info = self.config.get_connection_info()
        self.server = await asyncio.start_server(
            self.handle_client,
            info['host'],
            info['port'],
            limit=self.config.max_line_length
        )
        
        addr = ', '.join(str(sock.getsockname()) for sock in self.server.sockets)
        logger.info(f"Chat room open, listening on {addr}")
    
    async def serve_forever(self):
        """Start the server and accept connections until cancelled."""
        if self.server is None:
            await self.start()
        await self.server.serve_forever()
    
    async def stop(self):
        """Stop accepting connections and terminate every open session."""
        if self.server is not None:
            self.server.close()
        
        for session in list(self.sessions.values()):
            await session.terminate()
        
        # Waits for open connections too, so only after the sessions are gone
        if self.server is not None:
            await self.server.wait_closed()
        logger.info("Chat room closed")
