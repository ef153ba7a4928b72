"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from typing import Union

from common.constants import LOG_DATE_FORMAT, LOG_FORMAT


class ServerLogger:
    """Server logging class."""
    
    def __init__(self, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('chatroom_server')
        self.logger.setLevel(log_level)
        
        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
        
        # Create console handler
        self.console_handler = logging.StreamHandler()
        self.console_handler.setLevel(log_level)
        self.console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        
        self.logger.addHandler(self.console_handler)
    
    def set_level(self, level: Union[int, str]):
        """Change the level of the logger and its console handler."""
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level: {level}")
        self.logger.setLevel(level)
        self.console_handler.setLevel(level)
    
    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)
    
    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)
    
    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)
    
    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)
    
    def log_connection(self, addr, uid: int):
        """Log client connection."""
        self.info(f"New connection from {addr}, assigned uid={uid}")
    
    def log_login(self, username: str, uid: int):
        """Log accepted username."""
        self.info(f"User '{username}' joined with uid={uid}")
    
    def log_name_rejected(self, username: str, uid: int):
        self.info(f"Username '{username}' already in use, rejected for uid={uid}")
    
    def log_disconnect(self, username: str, uid: int):
        """Log user disconnect."""
        self.info(f"User {username} (uid={uid}) disconnected")
    
    def log_broadcast(self, message: str, recipients: int):
        """Echo a broadcast line to the server console."""
        self.info(message)
        self.debug(f"Broadcast delivered to {recipients} sessions")
    
    def log_command(self, username: str, uid: int, command: str):
        self.debug(f"Command {command} from {username} (uid={uid})")
    
    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ServerLogger()
