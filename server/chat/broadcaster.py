"""
Broadcast module.

Delivers one line to every session currently in the registry.
"""

from server.chat.registry import SessionRegistry
from server.utils.logger import logger


class Broadcaster:
    """Fan-out of announcements and chat lines to all active sessions."""
    
    def __init__(self, registry: SessionRegistry):
        self.registry = registry
    
    async def broadcast(self, message: str) -> int:
        """
        Queue message on every live session and return how many accepted it.
        A failing recipient is logged and skipped; nothing is raised to the caller.
        Sockets are flushed by each recipient's own writer task, never here.
        """
        sessions = await self.registry.snapshot()
        
        # No await between the snapshot and the queueing below, so each line is
        # queued on every session before the next broadcast takes its snapshot.
        delivered = 0
        for session in sessions:
            try:
                accepted = session.deliver(message)
            except Exception as e:
                logger.error(f"Failed to broadcast to uid={session.uid}: {e}")
                continue
            if accepted:
                delivered += 1
        
        logger.log_broadcast(message, delivered)
        return delivered
