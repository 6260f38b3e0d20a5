"""
Client configuration module.

This module handles client-side configuration settings.
"""

from typing import Optional

from roomchat.common.constants import DEFAULT_HOST, DEFAULT_PORT


class ClientConfig:
    """Client configuration class."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, nickname: Optional[str] = None):
        self.host = host
        self.port = port
        # None means the user answers the server's prompt
        self.nickname = nickname

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port,
            'nickname': self.nickname
        }
