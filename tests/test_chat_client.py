#!/usr/bin/env python3
"""
Unit tests for the terminal chat client.
"""

import asyncio
import io
import unittest
from unittest.mock import AsyncMock, Mock

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from client.chat.chat_client import ChatClient
from client.utils.config import ClientConfig


class TestChatClient(unittest.IsolatedAsyncioTestCase):
    
    async def asyncSetUp(self):
        self.stdout = io.StringIO()
        self.client = ChatClient(ClientConfig('127.0.0.1', 1303), stdin=io.StringIO(), stdout=self.stdout)
    
    async def test_receive_loop_prints_until_eof(self):
        reader = asyncio.StreamReader()
        reader.feed_data(b"alice has connected\nType /help to see a list of possible commands\n")
        reader.feed_eof()
        self.client.reader = reader
        
        await asyncio.wait_for(self.client.receive_loop(), 1.0)
        
        self.assertEqual(self.stdout.getvalue(),
                         "alice has connected\nType /help to see a list of possible commands\n")
    
    async def test_send_loop_writes_lines_until_input_ends(self):
        writer = Mock()
        writer.drain = AsyncMock()
        self.client.writer = writer
        lines = asyncio.Queue()
        for line in ("alice", "/usercount", None):
            lines.put_nowait(line)
        
        await asyncio.wait_for(self.client.send_loop(lines), 1.0)
        
        self.assertEqual([c.args[0] for c in writer.write.call_args_list],
                         [b"alice\n", b"/usercount\n"])
    
    async def test_input_thread_forwards_stdin(self):
        self.client.stdin = io.StringIO("bob\r\nhello\n")
        lines = self.client._start_input_thread(asyncio.get_running_loop())
        
        received = [await asyncio.wait_for(lines.get(), 1.0) for _ in range(3)]
        
        self.assertEqual(received, ["bob", "hello", None])
    
    def test_config(self):
        self.assertEqual(ClientConfig().get_connection_info(), {'host': 'localhost', 'port': 1303})


if __name__ == '__main__':
    unittest.main()
