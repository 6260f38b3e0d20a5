#!/usr/bin/env python3
"""
roomchat Server - Main Entry Point

This is the main entry point for the server application.
It accepts TCP connections, reads a nickname from each one, joins it to the
shared ChatRoom and relays room messages back onto the wire, one per line.
"""

import argparse
import asyncio
from typing import List, Optional

from roomchat.common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, ENCODING, LINE_TERMINATOR, LOG_LEVEL,
    MAX_LINE_BYTES, OUTBOUND_QUEUE_SIZE, WELCOME_PROMPT
)
from roomchat.common.messages import JoinError, render
from roomchat.server.chat.chat_room import ChatRoom, Session
from roomchat.server.utils.config import ServerConfig
from roomchat.server.utils.logger import logger

NEWLINE = LINE_TERMINATOR.encode(ENCODING)


class ChatRoomServer:
    """TCP line server in front of a single ChatRoom."""

    def __init__(self, config: Optional[ServerConfig] = None, room: Optional[ChatRoom] = None):
        self.config = config or ServerConfig()
        self.room = room or ChatRoom()
        self.server: Optional[asyncio.AbstractServer] = None

    async def handle_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        """Handle individual client connection."""
        addr = writer.get_extra_info('peername')
        logger.log_connection(addr)

        try:
            await self._write_line(writer, WELCOME_PROMPT)

            data = await self._read_line(reader)
            if not data:
                return
            nickname = self._decode(data)

            queue: asyncio.Queue = asyncio.Queue(maxsize=self.config.outbound_queue_size)
            try:
                session = self.room.join(nickname, queue)
            except JoinError as e:
                logger.log_join_rejected(nickname, e)
                await self._write_line(writer, str(e))
                return

            relay_task = asyncio.create_task(self._relay(queue, writer, session.nickname))
            try:
                with session:
                    await self._chat(reader, session)
            finally:
                await self._stop_relay(queue, relay_task, session.nickname)

        except (ConnectionError, asyncio.IncompleteReadError, OSError) as e:
            logger.log_error(f"connection {addr}", e)
        finally:
            await self._close_writer(writer)
            logger.log_connection_ended(addr)

    async def _chat(self, reader: asyncio.StreamReader, session: Session):
        """Forward every inbound line to the room until the peer stops sending."""
        while True:
            data = await self._read_line(reader)
            if not data:
                break
            session.send_message(self._decode(data))

    async def _relay(self, queue: asyncio.Queue, writer: asyncio.StreamWriter, nickname: str):
        """Write queued room messages to one participant until told to stop."""
        try:
            while True:
                message = await queue.get()
                if message is None:
                    break
                await self._write_line(writer, render(message))
        except (ConnectionError, OSError) as e:
            logger.debug(f"Relay to '{nickname}' stopped: {e}")

    async def _stop_relay(self, queue: asyncio.Queue, relay_task: asyncio.Task, nickname: str):
        """Let the relay flush what is already queued, then make sure it is gone."""
        try:
            queue.put_nowait(None)
        except asyncio.QueueFull:
            relay_task.cancel()

        done, _ = await asyncio.wait({relay_task}, timeout=self.config.relay_flush_timeout)
        if not done:
            relay_task.cancel()
            return

        if not relay_task.cancelled() and relay_task.exception() is not None:
            logger.log_error(f"relay to '{nickname}'", relay_task.exception())

    async def _read_line(self, reader: asyncio.StreamReader) -> bytes:
        """
        Read one line, skipping lines longer than the stream limit.

        Returns b'' at end of stream. A final line without a terminator is
        returned as-is.
        """
        while True:
            try:
                return await reader.readuntil(NEWLINE)
            except asyncio.IncompleteReadError as e:
                return e.partial
            except asyncio.LimitOverrunError as e:
                logger.warning(f"Dropping inbound line longer than {self.config.max_line_bytes} bytes")
                await self._discard_line(reader, e.consumed)

    @staticmethod
    async def _discard_line(reader: asyncio.StreamReader, consumed: int):
        try:
            await reader.readexactly(consumed)
            while True:
                try:
                    await reader.readuntil(NEWLINE)
                    return
                except asyncio.LimitOverrunError as e:
                    await reader.readexactly(e.consumed)
        except asyncio.IncompleteReadError:
            # Peer closed mid-line; the next read reports end of stream
            return

    @staticmethod
    def _decode(data: bytes) -> str:
        return data.decode(ENCODING, errors='replace').strip()

    @staticmethod
    async def _write_line(writer: asyncio.StreamWriter, text: str):
        writer.write((text + LINE_TERMINATOR).encode(ENCODING))
        await writer.drain()

    @staticmethod
    async def _close_writer(writer: asyncio.StreamWriter):
        try:
            writer.close()
            await writer.wait_closed()
        except (ConnectionError, OSError):
            pass

    async def start(self) -> asyncio.AbstractServer:
        """Bind the listening socket and start accepting connections."""
        self.server = await asyncio.start_server(
            self.handle_client,
            self.config.host,
            self.config.port,
            limit=self.config.max_line_bytes
        )

        addr = ', '.join(str(sock.getsockname()) for sock in self.server.sockets)
        logger.info(f"Listening to {addr}")
        return self.server

    def get_port(self) -> int:
        """Get the port actually bound, useful when configured with port 0."""
        return self.server.sockets[0].getsockname()[1]

    async def serve_forever(self):
        """Start the server and serve until cancelled."""
        if self.server is None:
            await self.start()
        async with self.server:
            await self.server.serve_forever()

    async def stop(self):
        """Stop accepting connections."""
        if self.server is not None:
            self.server.close()
            await self.server.wait_closed()
            self.server = None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse server command line arguments."""
    parser = argparse.ArgumentParser(description='roomchat Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('-p', '--port', type=int, default=DEFAULT_PORT,
                        help=f'bind the service to this tcp port (default: {DEFAULT_PORT})')
    parser.add_argument('--queue-size', type=int, default=OUTBOUND_QUEUE_SIZE,
                        help=f'Pending messages per participant before drops (default: {OUTBOUND_QUEUE_SIZE})')
    parser.add_argument('--max-line-bytes', type=int, default=MAX_LINE_BYTES,
                        help=f'Longest accepted inbound line (default: {MAX_LINE_BYTES})')
    parser.add_argument('--logs-dir', type=str, default=None,
                        help='Directory for chat_history.log (default: no log file)')
    parser.add_argument('--log-level', type=str, default=LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help=f'Console log level (default: {LOG_LEVEL})')
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ServerConfig:
    """Create a ServerConfig from parsed arguments."""
    return ServerConfig(
        host=args.host,
        port=args.port,
        outbound_queue_size=args.queue_size,
        max_line_bytes=args.max_line_bytes,
        logs_dir=args.logs_dir,
        log_level=args.log_level
    )


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    config = build_config(parse_args(argv))
    logger.configure(config.log_level, config.logs_dir)

    server = ChatRoomServer(config)
    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
    except OSError as e:
        logger.log_error("server", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
