"""
Session module.

One Session per accepted connection: it negotiates a unique username,
feeds every following line to the dispatcher and cleans up exactly once
when the client quits, disconnects or fails.

Each session owns two helper tasks. The reader pumps transport lines into
a bounded inbox; the writer drains a bounded outbox to the transport, so
a client that stops reading only ever stalls its own writer.
"""

import asyncio
import time
from typing import Callable, Iterable, Optional

from common.constants import HELP_HINT, JOIN_PROMPT, NAME_IN_USE
from common.protocol_definitions import (
    SessionState, create_join_announcement, create_leave_announcement
)
from server.chat.broadcaster import Broadcaster
from server.chat.registry import RegistrationHandle, SessionRegistry
from server.chat.transport import LineTransport
from server.utils.config import ServerConfig
from server.utils.logger import logger


class Session:
    """Server-side state of one connected client."""
    
    def __init__(self, uid: int, transport: LineTransport, registry: SessionRegistry,
                 broadcaster: Broadcaster, dispatcher, config: Optional[ServerConfig] = None,
                 clock: Callable[[], float] = time.time):
        settings = (config or ServerConfig()).get_session_settings()
        
        self.uid = uid
        self.transport = transport
        self.registry = registry
        self.broadcaster = broadcaster
        self.dispatcher = dispatcher
        self.clock = clock
        self.read_timeout = settings['read_timeout']
        self.flush_timeout = settings['flush_timeout']
        
        self.username: Optional[str] = None
        self.joined_at: Optional[float] = None
        self.state = SessionState.NEGOTIATING
        
        self._handle: Optional[RegistrationHandle] = None
        self._inbox: asyncio.Queue = asyncio.Queue(maxsize=settings['inbound_queue_size'])
        self._outbox: asyncio.Queue = asyncio.Queue(maxsize=settings['outbound_queue_size'])
        self._outbox_closed = False
        self._reader_task: Optional[asyncio.Task] = None
        self._writer_task: Optional[asyncio.Task] = None
        self._closer_task: Optional[asyncio.Task] = None
    
    def __repr__(self):
        return f"Session(uid={self.uid}, username={self.username!r}, state={self.state.name})"
    
    async def run(self):
        """Drive the session from negotiation to termination."""
        self._reader_task = asyncio.create_task(self._read_lines())
        self._writer_task = asyncio.create_task(self._write_lines())
        try:
            if await self._negotiate():
                await self._message_loop()
        except (ConnectionError, OSError) as e:
            logger.info(f"Connection lost for uid={self.uid}: {e}")
        finally:
            await self.terminate()
    
    def deliver(self, line: str) -> bool:
        """
        Queue a line for this client without waiting for the socket.
        Returns False if the session is closing or has stopped reading;
        in the latter case the session is disconnected.
        """
        if self._outbox_closed:
            return False
        try:
            self._outbox.put_nowait(line)
        except asyncio.QueueFull:
            logger.warning(f"uid={self.uid} is not reading its output, disconnecting")
            self._outbox_closed = True
            self._schedule_terminate()
            return False
        return True
    
    async def send(self, line: str):
        """Reply privately to this client."""
        self.deliver(line)
    
    async def send_lines(self, lines: Iterable[str]):
        for line in lines:
            self.deliver(line)
    
    async def _read_lines(self):
        """Pump lines from the transport into the inbox; None marks end of stream."""
        try:
            while True:
                line = await self.transport.read_line()
                await self._inbox.put(line)
                if line is None:
                    return
        except (ConnectionError, OSError) as e:
            logger.debug(f"Read failed for uid={self.uid}: {e}")
            await self._inbox.put(None)
    
    async def _write_lines(self):
        """Flush queued lines to the transport, one at a time."""
        while True:
            line = await self._outbox.get()
            try:
                self.transport.write_line(line)
                await self.transport.drain()
            except (ConnectionError, OSError) as e:
                logger.info(f"Write failed for uid={self.uid}: {e}")
                self._outbox_closed = True
                self._discard_outbox()
                self._schedule_terminate()
                return
            finally:
                self._outbox.task_done()
    
    def _discard_outbox(self):
        while not self._outbox.empty():
            self._outbox.get_nowait()
            self._outbox.task_done()
    
    def _schedule_terminate(self):
        """Terminate from a context that must not wait for it."""
        if self.state is SessionState.TERMINATED or self._closer_task is not None:
            return
        self._closer_task = asyncio.create_task(self.terminate())
        self._closer_task.add_done_callback(self._closer_done)
    
    def _closer_done(self, task: asyncio.Task):
        if not task.cancelled() and task.exception() is not None:
            logger.log_error(f"terminate uid={self.uid}", task.exception())
    
    async def _next_line(self) -> Optional[str]:
        if self.read_timeout is None:
            line = await self._inbox.get()
        else:
            try:
                line = await asyncio.wait_for(self._inbox.get(), self.read_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"uid={self.uid} idle for {self.read_timeout}s, closing")
                return None
        
        if self.state is SessionState.TERMINATED:
            return None
        return line
    
    async def _negotiate(self) -> bool:
        """Claim a username. Returns False if the stream ended first."""
        await self.send(JOIN_PROMPT)
        
        while True:
            line = await self._next_line()
            if line is None:
                return False
            
            candidate = line.strip()
            if not candidate:
                await self.send(JOIN_PROMPT)
                continue
            
            if await self.registry.try_claim(candidate):
                if self.state is SessionState.TERMINATED:
                    await self.registry.abandon_claim(candidate)
                    return False
                break
            
            logger.log_name_rejected(candidate, self.uid)
            await self.send(NAME_IN_USE)
            await self.send(JOIN_PROMPT)
        
        self.username = candidate
        self.joined_at = self.clock()
        handle = await self.registry.register(self)
        if self.state is SessionState.TERMINATED:
            # terminate() ran while register() waited for the lock
            await self.registry.release(handle)
            return False
        self._handle = handle
        self.state = SessionState.ACTIVE
        logger.log_login(self.username, self.uid)
        
        await self.broadcaster.broadcast(create_join_announcement(self.username))
        await self.send(HELP_HINT)
        return True
    
    async def _message_loop(self):
        while self.state is SessionState.ACTIVE:
            line = await self._next_line()
            if line is None:
                return
            if not await self.dispatcher.dispatch(self, line):
                return
    
    async def terminate(self):
        """
        Announce the departure, leave the registry and close the transport.
        Only the first call has any effect, so /quit racing a lost connection
        announces once.
        """
        if self.state is SessionState.TERMINATED:
            return
        self.state = SessionState.TERMINATED
        
        if self._reader_task is not None and self._reader_task is not asyncio.current_task():
            self._reader_task.cancel()
        # Wake run() if terminate() came from outside while it waits for input
        try:
            self._inbox.put_nowait(None)
        except asyncio.QueueFull:
            pass
        
        handle, self._handle = self._handle, None
        if handle is not None:
            # Still registered here, so the leaving client gets the line too
            await self.broadcaster.broadcast(create_leave_announcement(self.username))
            await self.registry.release(handle)
            logger.log_disconnect(self.username, self.uid)
        elif self.username is not None:
            # Claimed but never registered
            await self.registry.abandon_claim(self.username)
        self._outbox_closed = True
        
        await self._flush_outbox()
        await self.transport.close()
    
    async def _flush_outbox(self):
        """Give the writer a bounded chance to send what is queued, then stop it."""
        writer = self._writer_task
        if writer is None or writer is asyncio.current_task():
            return
        if not writer.done():
            try:
                await asyncio.wait_for(self._outbox.join(), self.flush_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"uid={self.uid} did not take its last lines within {self.flush_timeout}s")
        writer.cancel()
