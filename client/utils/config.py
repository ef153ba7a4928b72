"""
Client configuration module.

This module handles client-side configuration settings.
"""

from common.constants import DEFAULT_HOST, DEFAULT_PORT


class ClientConfig:
    """Client configuration class."""
    
    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
        self.host = host
        self.port = port
    
    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }
