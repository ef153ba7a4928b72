"""
Server configuration module.

This module handles server-side configuration settings.
"""

from typing import Optional

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, DEFAULT_READ_TIMEOUT, FLUSH_TIMEOUT, INBOUND_QUEUE_SIZE,
    LOG_LEVEL, MAX_LINE_LENGTH, OUTBOUND_QUEUE_SIZE
)


class ServerConfig:
    """Server configuration class."""
    
    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 read_timeout: Optional[float] = DEFAULT_READ_TIMEOUT,
                 inbound_queue_size: int = INBOUND_QUEUE_SIZE,
                 outbound_queue_size: int = OUTBOUND_QUEUE_SIZE,
                 flush_timeout: float = FLUSH_TIMEOUT, log_level: str = LOG_LEVEL):
        if not 0 <= port <= 65535:
            raise ValueError(f"Port out of range: {port}")
        if read_timeout is not None and read_timeout <= 0:
            raise ValueError("read_timeout must be positive")
        if inbound_queue_size < 1 or outbound_queue_size < 1:
            raise ValueError("Queue sizes must be at least 1")
        if flush_timeout < 0:
            raise ValueError("flush_timeout must not be negative")
        
        self.host = host
        self.port = port
        
        # Session settings
        self.read_timeout = read_timeout  # None disables the idle timeout
        self.inbound_queue_size = inbound_queue_size
        self.outbound_queue_size = outbound_queue_size
        self.flush_timeout = flush_timeout
        self.max_line_length = MAX_LINE_LENGTH
        
        # Logging configuration
        self.log_level = log_level
    
    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }
    
    def get_session_settings(self):
        """Get per-session settings."""
        return {
            'read_timeout': self.read_timeout,
            'inbound_queue_size': self.inbound_queue_size,
            'outbound_queue_size': self.outbound_queue_size,
            'flush_timeout': self.flush_timeout
        }
