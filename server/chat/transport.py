"""
Line transport module.

Wraps an asyncio stream pair into a duplex channel of text lines.
"""

import asyncio
from typing import Optional

from common.constants import ENCODING, LINE_TERMINATOR
from server.utils.logger import logger


class LineTransport:
    """Newline-delimited text channel over an asyncio stream pair."""
    
    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self.reader = reader
        self.writer = writer
        self.closed = False
    
    @property
    def peername(self):
        return self.writer.get_extra_info('peername')
    
    async def read_line(self) -> Optional[str]:
        """
        Read the next line without its terminator.
        Returns None once the peer has closed its side of the stream.
        Raises ConnectionError if the stream fails or a line exceeds the reader limit.
        """
        if self.closed:
            return None
        
        try:
            data = await self.reader.readline()
        except ValueError as e:
            # StreamReader reports an over-long line as ValueError
            raise ConnectionError(f"Line too long: {e}") from e
        
        if not data:
            return None
        return data.decode(ENCODING, errors='replace').rstrip('\r\n')
    
    def write_line(self, line: str):
        """Buffer one line for sending. Call drain() to flush."""
        if self.closed or self.writer.is_closing():
            raise ConnectionError("Transport is closed")
        self.writer.write((line + LINE_TERMINATOR).encode(ENCODING))
    
    async def drain(self):
        await self.writer.drain()
    
    async def close(self):
        """Close the stream. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        
        try:
            self.writer.close()
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug(f"Error while closing transport {self.peername}: {e}")
