"""
Client package for roomchat.

This package contains the client-side functionality:
- Line-based connection to the room
- Interactive terminal interface
- Configuration and utilities
"""
