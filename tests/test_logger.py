#!/usr/bin/env python3
"""
Unit tests for the server logger's chat history file.
"""

import logging
import queue
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from roomchat.common.constants import LOG_LEVEL
from roomchat.server.chat.chat_room import ChatRoom
from roomchat.server.utils.logger import logger


class TestChatHistoryLog(unittest.TestCase):
    """Test cases for chat_history.log output."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        logger.configure(LOG_LEVEL, None)
        self.tmp.cleanup()

    def test_no_file_by_default(self):
        logger.configure(LOG_LEVEL, None)
        self.assertIsNone(logger.chat_log_path)

    def test_room_events_are_written(self):
        logs_dir = Path(self.tmp.name) / 'logs'
        logger.configure('WARNING', str(logs_dir))

        room = ChatRoom()
        alice = room.join("alice", queue.Queue())
        room.join("bob", queue.Queue())
        alice.send_message("hello | world")
        alice.leave()

        lines = (logs_dir / 'chat_history.log').read_text(encoding='utf-8').splitlines()
        self.assertEqual(len(lines), 4)
        self.assertTrue(lines[0].endswith("| JOIN | alice (session=1)"))
        self.assertTrue(lines[1].endswith("| JOIN | bob (session=2)"))
        self.assertTrue(lines[2].endswith("| CHAT | alice (session=1) | hello | world"))
        self.assertIn("| LEAVE | alice (session=1) | joined ", lines[3])

    def test_unencodable_chat_text_does_not_escape(self):
        logger.configure('WARNING', self.tmp.name)

        room = ChatRoom()
        alice = room.join("alice", queue.Queue())
        bob_sink = queue.Queue()
        room.join("bob", bob_sink)

        self.assertEqual(alice.send_message("bad \udc80 text"), 1)
        self.assertTrue(alice.leave())

        history = (Path(self.tmp.name) / 'chat_history.log').read_text(encoding='utf-8')
        self.assertIn("| CHAT | alice (session=1) | bad \\udc80 text", history)
        self.assertIn("| LEAVE | alice (session=1)", history)

    def test_write_failure_is_reported_not_raised(self):
        logger.configure('WARNING', self.tmp.name)
        room = ChatRoom()
        alice = room.join("alice", queue.Queue())
        room.join("bob", queue.Queue())

        with patch('builtins.open', side_effect=PermissionError("read-only")), \
                patch.object(logger, 'error') as log_error:
            self.assertEqual(alice.send_message("hello"), 1)

        log_error.assert_called_once()
        self.assertIn("read-only", log_error.call_args[0][0])

    def test_level_names_are_accepted(self):
        logger.configure('debug', None)
        self.assertEqual(logger.logger.level, logging.DEBUG)


if __name__ == '__main__':
    unittest.main()
