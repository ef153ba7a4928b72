"""
Server package for the chat room service.

This package contains all server-side functionality including:
- Session registry and username claims
- Per-connection sessions and command dispatch
- Broadcast fan-out
- Client connection management
- Configuration and utilities
"""
