"""
Client package for the chat room service.

This package contains the terminal client:
- Relaying typed lines to the server
- Printing server lines as they arrive
- Configuration and utilities
"""
