"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from roomchat.common.constants import CHAT_LOG_FILE, LOG_LEVEL


class ServerLogger:
    """Server logging class."""

    def __init__(self, logs_dir: Optional[str] = None, log_level: Union[int, str] = LOG_LEVEL):
        # Set up main logger
        self.logger = logging.getLogger('roomchat_server')

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        self.console_handler = logging.StreamHandler()

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.console_handler.setFormatter(formatter)

        # Add handler to logger
        self.logger.addHandler(self.console_handler)

        self.logs_dir: Optional[Path] = None
        self.chat_log_path: Optional[Path] = None
        self.configure(log_level, logs_dir)

    def configure(self, log_level: Union[int, str] = LOG_LEVEL, logs_dir: Optional[str] = None):
        """Set the log level and, when logs_dir is given, enable the chat history file."""
        if isinstance(log_level, str):
            log_level = log_level.upper()
        self.logger.setLevel(log_level)
        self.console_handler.setLevel(log_level)

        if logs_dir:
            self.logs_dir = Path(logs_dir)
            self.logs_dir.mkdir(parents=True, exist_ok=True)
            self.chat_log_path = self.logs_dir / CHAT_LOG_FILE
        else:
            self.logs_dir = None
            self.chat_log_path = None

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)

    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, addr: tuple):
        """Log client connection."""
        self.info(f"{addr} - connected!")

    def log_connection_ended(self, addr: tuple):
        """Log end of a client connection."""
        self.info(f"{addr} - connection ended")

    def log_join(self, nickname: str, session_id: int):
        """Log participant join."""
        self.info(f"'{nickname}' joined the room (session={session_id})")
        self._write_chat_log(f"JOIN | {nickname} (session={session_id})")

    def log_join_rejected(self, nickname: str, error: Exception):
        """Log a rejected join attempt."""
        self.warning(f"Join rejected for {nickname!r}: {error}")

    def log_leave(self, nickname: str, session_id: int, joined_at: str = ""):
        """Log participant leave."""
        self.info(f"'{nickname}' left the room (session={session_id}, joined at {joined_at})")
        self._write_chat_log(f"LEAVE | {nickname} (session={session_id}) | joined {joined_at}")

    def log_chat(self, nickname: str, session_id: int, text: str):
        """Log chat message."""
        self.debug(f"Chat from {nickname} (session={session_id}): {text}")
        self._write_chat_log(f"CHAT | {nickname} (session={session_id}) | {text}")

    def log_delivery_failure(self, nickname: str, error: Exception):
        """Log a message that could not be queued for a participant."""
        self.warning(f"Dropped message for '{nickname}': {error!r}")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")

    def _write_chat_log(self, content: str):
        """Append a timestamped line to the chat history file, if enabled."""
        if self.chat_log_path is None:
            return
        self._write_to_file(self.chat_log_path, f"{datetime.now().isoformat()} | {content}")

    def _write_to_file(self, file_path: Path, content: str):
        """Write content to log file."""
        try:
            with open(file_path, 'a', encoding='utf-8', errors='backslashreplace') as f:
                f.write(content + '\n')
        except Exception as e:
            self.error(f"Failed to write to log file {file_path}: {e}")


# Global logger instance
logger = ServerLogger()
