"""
Session registry module.

The registry is the single source of truth for who is connected. Every
operation runs under one asyncio lock and performs no I/O while holding it.
"""

import asyncio
from typing import Dict, List, Set


class RegistryError(RuntimeError):
    """Raised when the registry is used out of protocol."""


class RegistrationHandle:
    """Opaque token returned by register() and presented back to release()."""
    
    __slots__ = ('uid', 'username')
    
    def __init__(self, uid: int, username: str):
        self.uid = uid
        self.username = username
    
    def __repr__(self):
        return f"RegistrationHandle(uid={self.uid}, username={self.username!r})"


class SessionRegistry:
    """Shared set of live sessions and claimed usernames."""
    
    def __init__(self):
        self.lock = asyncio.Lock()
        self._claimed: Set[str] = set()  # reserved names, registered or not
        self._handles: Dict[str, RegistrationHandle] = {}  # registered username -> handle
        self._sessions: Dict[RegistrationHandle, object] = {}  # handle -> session
    
    async def try_claim(self, name: str) -> bool:
        """Reserve name if nobody holds it. Returns False without changes otherwise."""
        async with self.lock:
            if name in self._claimed:
                return False
            self._claimed.add(name)
            return True
    
    async def abandon_claim(self, name: str):
        """Give back a name that was claimed but never registered."""
        async with self.lock:
            if name not in self._handles:
                self._claimed.discard(name)
    
    async def register(self, session) -> RegistrationHandle:
        """
        Add a session whose username was claimed with try_claim().
        Returns the handle the session must present to release().
        """
        username = session.username
        async with self.lock:
            if username is None or username not in self._claimed:
                raise RegistryError(f"Username {username!r} was not claimed before register")
            if username in self._handles:
                raise RegistryError(f"Username {username!r} is already registered")
            
            handle = RegistrationHandle(session.uid, username)
            self._handles[username] = handle
            self._sessions[handle] = session
            return handle
    
    async def release(self, handle: RegistrationHandle) -> bool:
        """
        Remove the session and free its username in one step.
        Returns True only for the call that actually removed it.
        """
        async with self.lock:
            if self._sessions.pop(handle, None) is None:
                return False
            del self._handles[handle.username]
            self._claimed.discard(handle.username)
            return True
    
    async def snapshot(self) -> List:
        """Copy of the live sessions, safe to iterate without the lock."""
        async with self.lock:
            return list(self._sessions.values())
    
    async def count(self) -> int:
        async with self.lock:
            return len(self._sessions)
    
    async def username_list(self) -> List[str]:
        async with self.lock:
            return sorted(self._handles)
    
    async def is_claimed(self, name: str) -> bool:
        async with self.lock:
            return name in self._claimed
