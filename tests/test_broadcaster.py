#!/usr/bin/env python3
"""
Unit tests for Broadcaster.

Covers:
- Delivery to every registered session
- Isolation of failing or closing recipients
- Identical ordering of concurrent broadcasts at every recipient
"""

import asyncio
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from server.chat.broadcaster import Broadcaster
from server.chat.registry import SessionRegistry


class Recipient:
    """Session double that records queued lines."""
    
    def __init__(self, uid: int, username: str):
        self.uid = uid
        self.username = username
        self.sent = []
        self.accepting = True
        self.error = None
    
    def deliver(self, line: str) -> bool:
        if self.error is not None:
            raise self.error
        if not self.accepting:
            return False
        self.sent.append(line)
        return True


class TestBroadcaster(unittest.IsolatedAsyncioTestCase):
    """Test cases for broadcast fan-out."""
    
    async def asyncSetUp(self):
        self.registry = SessionRegistry()
        self.broadcaster = Broadcaster(self.registry)
        self.handles = {}
    
    async def _join(self, uid: int, username: str):
        session = Recipient(uid, username)
        await self.registry.try_claim(username)
        self.handles[username] = await self.registry.register(session)
        return session
    
    async def test_delivers_to_all_sessions(self):
        alice = await self._join(1, "alice")
        bob = await self._join(2, "bob")
        
        delivered = await self.broadcaster.broadcast("alice: hi")
        
        self.assertEqual(delivered, 2)
        self.assertEqual(alice.sent, ["alice: hi"])
        self.assertEqual(bob.sent, ["alice: hi"])
    
    async def test_no_sessions(self):
        self.assertEqual(await self.broadcaster.broadcast("nobody here"), 0)
    
    async def test_failing_recipient_is_isolated(self):
        """A recipient that raises does not stop the others."""
        alice = await self._join(1, "alice")
        bob = await self._join(2, "bob")
        carol = await self._join(3, "carol")
        bob.error = RuntimeError("boom")
        
        delivered = await self.broadcaster.broadcast("carol: hello")
        
        self.assertEqual(delivered, 2)
        self.assertEqual(alice.sent, ["carol: hello"])
        self.assertEqual(carol.sent, ["carol: hello"])
    
    async def test_closing_recipient_not_counted(self):
        alice = await self._join(1, "alice")
        bob = await self._join(2, "bob")
        alice.accepting = False
        
        self.assertEqual(await self.broadcaster.broadcast("bob: hey"), 1)
        self.assertEqual(bob.sent, ["bob: hey"])
    
    async def test_released_session_not_included(self):
        alice = await self._join(1, "alice")
        bob = await self._join(2, "bob")
        await self.registry.release(self.handles["bob"])
        
        await self.broadcaster.broadcast("alice: still here?")
        
        self.assertEqual(alice.sent, ["alice: still here?"])
        self.assertEqual(bob.sent, [])
    
    async def test_concurrent_broadcasts_arrive_in_same_order_everywhere(self):
        sessions = [await self._join(uid, f"user{uid}") for uid in range(1, 6)]
        messages = [f"line {n}" for n in range(20)]
        
        await asyncio.gather(*(self.broadcaster.broadcast(m) for m in messages))
        
        first = sessions[0].sent
        self.assertEqual(sorted(first), sorted(messages))
        for session in sessions[1:]:
            self.assertEqual(session.sent, first)
    
    async def test_join_during_broadcast_sees_consistent_set(self):
        """A broadcast racing a join reaches either the old or the new set of sessions."""
        alice = await self._join(1, "alice")
        
        results = await asyncio.gather(
            self.broadcaster.broadcast("alice: racing"),
            self._join(2, "bob")
        )
        bob = results[1]
        
        self.assertEqual(alice.sent, ["alice: racing"])
        self.assertIn(results[0], (1, 2))
        self.assertEqual(len(bob.sent), results[0] - 1)
    
    async def test_broadcast_does_not_hold_the_registry_lock(self):
        await self._join(1, "alice")
        await self.broadcaster.broadcast("alice: hi")
        self.assertFalse(self.registry.lock.locked())


if __name__ == '__main__':
    unittest.main()
