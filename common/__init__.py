"""
Definitions shared by the chat room client and server.
"""
