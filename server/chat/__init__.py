"""
Chat module for server-side session handling.

Handles:
- Username negotiation
- Command dispatch
- Broadcasting to active sessions
- Disconnect cleanup
"""
