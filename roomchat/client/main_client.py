#!/usr/bin/env python3
"""
roomchat Client - Main Entry Point

Interactive terminal client for the room: lines typed on stdin are sent,
lines from the server are printed.
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from roomchat.common.constants import DEFAULT_HOST, DEFAULT_PORT
from roomchat.client.chat_client import ChatClient
from roomchat.client.utils.config import ClientConfig
from roomchat.client.utils.logger import logger


class RoomClient:
    """Terminal front end for a ChatClient."""

    def __init__(self, config: ClientConfig, output=None):
        self.config = config
        self.chat_client = ChatClient(config)
        self.output = output or sys.stdout

    def show(self, line: str):
        print(line, file=self.output, flush=True)

    async def read_input(self) -> str:
        """Read one line from stdin without blocking the event loop."""
        return await asyncio.get_running_loop().run_in_executor(None, sys.stdin.readline)

    async def listen_for_messages(self):
        """Print server lines until the server closes the connection."""
        while True:
            line = await self.chat_client.receive_line()
            if line is None:
                break
            self.show(line)

    async def login(self) -> bool:
        """Answer the nickname prompt, asking the user if no nickname was configured."""
        prompt = await self.chat_client.read_prompt()
        if prompt is None:
            logger.error("Server closed the connection before asking for a nickname")
            return False

        nickname = self.config.nickname
        if not nickname:
            self.show(prompt)
            nickname = (await self.read_input()).strip()

        roster = await self.chat_client.join(nickname)
        if roster is None:
            return False
        self.show(roster)
        return True

    async def interactive_mode(self):
        """Run client with interactive chat input."""
        if not await self.chat_client.connect():
            return

        try:
            if not await self.login():
                return

            listener_task = asyncio.create_task(self.listen_for_messages())
            logger.show_interactive_mode_info()

            try:
                while not listener_task.done():
                    input_task = asyncio.ensure_future(self.read_input())
                    done, _ = await asyncio.wait(
                        {input_task, listener_task}, return_when=asyncio.FIRST_COMPLETED
                    )
                    if input_task not in done:
                        # The executor thread stays blocked on stdin until Enter
                        logger.info("[INFO] Server closed the connection, press Enter to exit")
                        break
                    user_input = input_task.result()
                    if not user_input:
                        break
                    if not await self.chat_client.send_line(user_input.strip()):
                        break
            finally:
                listener_task.cancel()
                try:
                    await listener_task
                except asyncio.CancelledError:
                    pass
        finally:
            await self.chat_client.close()
            logger.info("[INFO] Disconnected from server")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse client command line arguments."""
    parser = argparse.ArgumentParser(description='roomchat Client')
    parser.add_argument('--host', type=str, default=DEFAULT_HOST,
                        help=f'Server address (default: {DEFAULT_HOST})')
    parser.add_argument('-p', '--port', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')
    parser.add_argument('--nickname', type=str, default=None,
                        help='Nickname to join with (default: asked interactively)')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parse_args(argv)
    client = RoomClient(ClientConfig(args.host, args.port, args.nickname))

    try:
        asyncio.run(client.interactive_mode())
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")


if __name__ == "__main__":
    main()
