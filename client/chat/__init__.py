"""
Chat module for the terminal client.

Handles:
- Connecting to the server
- Forwarding stdin lines
- Printing replies and broadcasts
"""
