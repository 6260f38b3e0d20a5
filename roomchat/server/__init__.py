"""
Server package for roomchat.

This package contains all server-side functionality including:
- The session registry and broadcast engine
- Client connection management over TCP
- Configuration and utilities
"""
