"""
Chat client module.

This module handles the client side of the room's line protocol.
"""

import asyncio
from typing import Optional

from roomchat.common.constants import ENCODING, LINE_TERMINATOR, MAX_LINE_BYTES
from roomchat.common.messages import ROSTER_PREFIX
from roomchat.client.utils.config import ClientConfig
from roomchat.client.utils.logger import logger


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.nickname: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self.writer is not None

    async def connect(self) -> bool:
        """Open the connection to the server."""
        try:
            self.reader, self.writer = await asyncio.open_connection(
                self.config.host, self.config.port, limit=MAX_LINE_BYTES
            )
        except OSError as e:
            logger.log_connection(self.config.host, self.config.port, False)
            logger.log_error("connect", e)
            return False

        logger.log_connection(self.config.host, self.config.port, True)
        return True

    async def read_prompt(self) -> Optional[str]:
        """Read the server's nickname prompt."""
        return await self.receive_line()

    async def join(self, nickname: str) -> Optional[str]:
        """
        Send the nickname and wait for the server's answer.

        Returns the roster line on success. On failure the server's error
        line is logged, the connection is closed and None is returned.
        """
        if not await self.send_line(nickname):
            return None

        reply = await self.receive_line()
        if reply is not None and reply.startswith(ROSTER_PREFIX):
            self.nickname = nickname
            logger.log_join(nickname, True)
            return reply

        logger.log_join(nickname, False, reply or "connection closed")
        await self.close()
        return None

    async def send_line(self, text: str) -> bool:
        """Send one line of text to the server."""
        if not self.writer:
            logger.error("Not connected to server")
            return False

        try:
            self.writer.write((text + LINE_TERMINATOR).encode(ENCODING))
            await self.writer.drain()
        except (ConnectionError, OSError) as e:
            logger.log_error("send", e)
            return False

        logger.log_chat_sent(text)
        return True

    async def receive_line(self) -> Optional[str]:
        """Read one line from the server. Returns None once the server closes."""
        if not self.reader:
            return None

        try:
            data = await self.reader.readline()
        except (ConnectionError, OSError, ValueError) as e:
            logger.log_error("receive", e)
            return None

        if not data:
            return None
        return data.decode(ENCODING, errors='replace').rstrip('\r\n')

    async def close(self):
        """Close the connection."""
        if self.writer is None:
            return
        writer, self.writer, self.reader = self.writer, None, None
        try:
            writer.close()
            await writer.wait_closed()
        except (ConnectionError, OSError):
            pass
