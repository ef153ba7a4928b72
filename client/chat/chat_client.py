"""
Chat client module.

Thin terminal shell: lines typed by the user go to the server, lines from
the server are printed as they arrive.
"""

import asyncio
import sys
import threading
from typing import Optional, TextIO

from common.constants import ENCODING, LINE_TERMINATOR
from client.utils.config import ClientConfig
from client.utils.logger import logger


class ChatClient:
    """Client-side chat shell."""
    
    def __init__(self, config: Optional[ClientConfig] = None,
                 stdin: TextIO = None, stdout: TextIO = None):
        self.config = config or ClientConfig()
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
    
    async def connect(self):
        """Open the connection to the server."""
        info = self.config.get_connection_info()
        try:
            self.reader, self.writer = await asyncio.open_connection(info['host'], info['port'])
        except OSError:
            logger.log_connection(info['host'], info['port'], False)
            raise
        logger.log_connection(info['host'], info['port'], True)
    
    async def send_line(self, line: str):
        self.writer.write((line + LINE_TERMINATOR).encode(ENCODING))
        await self.writer.drain()
    
    async def receive_loop(self):
        """Print server lines until the server closes the connection."""
        while True:
            data = await self.reader.readline()
            if not data:
                return
            self.stdout.write(data.decode(ENCODING, errors='replace'))
            self.stdout.flush()
    
    async def send_loop(self, lines: asyncio.Queue):
        while True:
            line = await lines.get()
            if line is None:
                return
            await self.send_line(line)
    
    def _start_input_thread(self, loop: asyncio.AbstractEventLoop) -> asyncio.Queue:
        """Read stdin on a daemon thread so a blocked read never holds up exit."""
        lines: asyncio.Queue = asyncio.Queue()
        
        def pump():
            for raw in self.stdin:
                loop.call_soon_threadsafe(lines.put_nowait, raw.rstrip('\r\n'))
            loop.call_soon_threadsafe(lines.put_nowait, None)
        
        threading.Thread(target=pump, name='chat-input', daemon=True).start()
        return lines
    
    async def run(self):
        """Connect and relay until either side closes."""
        await self.connect()
        lines = self._start_input_thread(asyncio.get_running_loop())
        
        receive_task = asyncio.create_task(self.receive_loop())
        send_task = asyncio.create_task(self.send_loop(lines))
        try:
            done, pending = await asyncio.wait(
                {receive_task, send_task}, return_when=asyncio.FIRST_COMPLETED
            )
            for task in pending:
                task.cancel()
            for task in done:
                task.result()
        finally:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except (ConnectionError, OSError):
                pass
