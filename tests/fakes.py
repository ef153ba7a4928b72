"""
In-memory stand-ins shared by the test modules.
"""

import asyncio

from server.chat.broadcaster import Broadcaster
from server.chat.dispatcher import CommandDispatcher
from server.chat.registry import SessionRegistry
from server.chat.session import Session
from server.utils.config import ServerConfig


class FakeClock:
    """Settable replacement for time.time."""
    
    def __init__(self, now: float = 1000.0):
        self.now = now
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float):
        self.now += seconds


class FakeTransport:
    """LineTransport double: lines are fed in by the test and recorded on the way out."""
    
    def __init__(self, peername=('127.0.0.1', 40000)):
        self.peername = peername
        self.incoming = asyncio.Queue()
        self.sent = []
        self.closed = False
        self.fail_writes = False
        self.fail_drain = False
        self.drain_gate = None  # asyncio.Event that must be set before drain returns
    
    def feed(self, *lines):
        for line in lines:
            self.incoming.put_nowait(line)
    
    def end(self):
        """Simulate the client closing its side of the stream."""
        self.incoming.put_nowait(None)
    
    def fail(self, error: Exception):
        """Make the next read raise error."""
        self.incoming.put_nowait(error)
    
    async def read_line(self):
        item = await self.incoming.get()
        if isinstance(item, Exception):
            raise item
        return item
    
    def write_line(self, line: str):
        if self.closed or self.fail_writes:
            raise ConnectionError("Transport is closed")
        self.sent.append(line)
    
    async def drain(self):
        if self.drain_gate is not None:
            await self.drain_gate.wait()
        if self.fail_drain:
            raise ConnectionResetError("Connection reset by peer")
    
    async def close(self):
        self.closed = True


class ChatHarness:
    """Registry, broadcaster and dispatcher wired together without sockets."""
    
    def __init__(self, config: ServerConfig = None, clock: FakeClock = None):
        self.config = config or ServerConfig()
        self.clock = clock or FakeClock()
        self.registry = SessionRegistry()
        self.broadcaster = Broadcaster(self.registry)
        self.dispatcher = CommandDispatcher(
            self.registry, self.broadcaster, self.clock(), 'testhost/127.0.0.1', self.clock
        )
        self.next_uid = 1
        self.tasks = []
    
    def connect(self):
        """Start a session on a fresh fake transport. Returns (session, transport)."""
        transport = FakeTransport(peername=('127.0.0.1', 40000 + self.next_uid))
        session = Session(self.next_uid, transport, self.registry, self.broadcaster,
                          self.dispatcher, self.config, self.clock)
        self.next_uid += 1
        self.tasks.append(asyncio.create_task(session.run()))
        return session, transport
    
    async def join(self, name: str):
        """Connect and claim name, waiting until the session is active."""
        session, transport = self.connect()
        transport.feed(name)
        await wait_for_line(transport, 'Type /help to see a list of possible commands')
        return session, transport
    
    async def close(self):
        for task in self.tasks:
            task.cancel()
        await asyncio.gather(*self.tasks, return_exceptions=True)


async def wait_until(predicate, timeout: float = 1.0):
    """Poll predicate until it holds or fail after timeout."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.005)


async def wait_for_line(transport: FakeTransport, line: str, timeout: float = 1.0):
    await wait_until(lambda: line in transport.sent, timeout)


async def settle():
    """Let every ready task run until the loop is idle."""
    for _ in range(20):
        await asyncio.sleep(0)
