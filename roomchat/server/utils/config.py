"""
Server configuration module.

This module handles server-side configuration settings.
"""

from typing import Optional

from roomchat.common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, OUTBOUND_QUEUE_SIZE, MAX_LINE_BYTES, LOG_LEVEL,
    RELAY_FLUSH_TIMEOUT
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 outbound_queue_size: int = OUTBOUND_QUEUE_SIZE,
                 max_line_bytes: int = MAX_LINE_BYTES,
                 relay_flush_timeout: float = RELAY_FLUSH_TIMEOUT,
                 logs_dir: Optional[str] = None, log_level: str = LOG_LEVEL):
        self.host = host
        self.port = port

        # Per-participant delivery settings
        self.outbound_queue_size = outbound_queue_size
        self.max_line_bytes = max_line_bytes
        self.relay_flush_timeout = relay_flush_timeout

        # Logging configuration
        self.logs_dir = logs_dir
        self.log_level = log_level

    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port
        }

    def get_queue_settings(self):
        """Get delivery queue and line limit settings."""
        return {
            'outbound_queue_size': self.outbound_queue_size,
            'max_line_bytes': self.max_line_bytes,
            'relay_flush_timeout': self.relay_flush_timeout
        }

    def get_log_settings(self):
        """Get logging settings."""
        return {
            'logs_dir': self.logs_dir,
            'log_level': self.log_level
        }
