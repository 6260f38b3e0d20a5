#!/usr/bin/env python3
"""
Tests for the roomchat client against a live server.
"""

import asyncio
import io
import unittest
from unittest.mock import patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from roomchat.common.constants import WELCOME_PROMPT
from roomchat.client.chat_client import ChatClient
from roomchat.client.main_client import RoomClient, parse_args
from roomchat.client.utils.config import ClientConfig
from roomchat.server.main_server import ChatRoomServer
from roomchat.server.utils.config import ServerConfig

TIMEOUT = 5


class TestChatClient(unittest.IsolatedAsyncioTestCase):
    """Test cases for ChatClient."""

    async def asyncSetUp(self):
        self.server = ChatRoomServer(ServerConfig(host='127.0.0.1', port=0))
        await self.server.start()
        self.port = self.server.get_port()
        self.clients = []

    async def asyncTearDown(self):
        for client in self.clients:
            await client.close()
        await self.server.stop()

    def make_client(self, nickname=None) -> ChatClient:
        client = ChatClient(ClientConfig('127.0.0.1', self.port, nickname))
        self.clients.append(client)
        return client

    async def test_connect_and_join(self):
        client = self.make_client()
        self.assertTrue(await client.connect())
        self.assertEqual(await client.read_prompt(), WELCOME_PROMPT)

        roster = await client.join("alice")

        self.assertEqual(roster, "* Welcome, the room contains: ")
        self.assertEqual(client.nickname, "alice")
        self.assertEqual(self.server.room.get_roster(), ["alice"])

    async def test_rejected_join_closes(self):
        client = self.make_client()
        await client.connect()
        await client.read_prompt()

        self.assertIsNone(await client.join("no spaces allowed"))
        self.assertFalse(client.connected)
        self.assertIsNone(client.nickname)

    async def test_chat_between_clients(self):
        alice, bob = self.make_client(), self.make_client()
        for client, nickname in ((alice, "alice"), (bob, "bob")):
            await client.connect()
            await client.read_prompt()
            self.assertIsNotNone(await client.join(nickname))

        self.assertEqual(await asyncio.wait_for(alice.receive_line(), TIMEOUT), "* bob joined the room")
        self.assertTrue(await bob.send_line("hello alice"))
        self.assertEqual(await asyncio.wait_for(alice.receive_line(), TIMEOUT), "[bob] hello alice")

        await bob.close()
        self.assertEqual(await asyncio.wait_for(alice.receive_line(), TIMEOUT), "* bob left the room")

    async def test_connect_failure(self):
        await self.server.stop()
        client = self.make_client()
        self.assertFalse(await client.connect())
        self.assertFalse(await client.send_line("nobody home"))
        self.assertIsNone(await client.receive_line())

    async def test_room_client_login_with_configured_nickname(self):
        output = io.StringIO()
        room_client = RoomClient(ClientConfig('127.0.0.1', self.port, "carol"), output=output)
        self.clients.append(room_client.chat_client)

        await room_client.chat_client.connect()
        self.assertTrue(await room_client.login())

        self.assertEqual(output.getvalue(), "* Welcome, the room contains: \n")
        self.assertEqual(self.server.room.get_roster(), ["carol"])

    async def test_room_client_login_asks_for_nickname(self):
        output = io.StringIO()
        room_client = RoomClient(ClientConfig('127.0.0.1', self.port), output=output)
        self.clients.append(room_client.chat_client)

        await room_client.chat_client.connect()
        with patch.object(RoomClient, 'read_input', return_value="dave\n"):
            self.assertTrue(await room_client.login())

        self.assertIn(WELCOME_PROMPT, output.getvalue())
        self.assertEqual(self.server.room.get_roster(), ["dave"])


class TestClientArguments(unittest.TestCase):
    """Test cases for client command line parsing."""

    def test_defaults(self):
        args = parse_args([])
        self.assertEqual((args.host, args.port, args.nickname), ('localhost', 5555, None))

    def test_overrides(self):
        args = parse_args(['--host', 'chat.local', '-p', '6000', '--nickname', 'erin'])
        config = ClientConfig(args.host, args.port, args.nickname)
        self.assertEqual(config.get_connection_info(),
                         {'host': 'chat.local', 'port': 6000, 'nickname': 'erin'})


if __name__ == '__main__':
    unittest.main()
