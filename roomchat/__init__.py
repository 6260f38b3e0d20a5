"""
roomchat - single-room chat broadcaster.

This package contains:
- The shared message model (common)
- The session registry and TCP line server (server)
- A terminal client for the room (client)
"""

__version__ = "1.0.0"
