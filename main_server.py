#!/usr/bin/env python3
"""
roomchat Server - Main Entry Point

Single-room chat server: participants join under a nickname, exchange text
lines and see who joins and leaves.

Usage:
    python main_server.py

Optional arguments:
    --host HOST             Bind address (default: 0.0.0.0)
    -p, --port PORT         TCP port (default: 5555)
    --queue-size N          Pending messages per participant before drops (default: 256)
    --max-line-bytes N      Longest accepted inbound line (default: 1 MiB)
    --logs-dir DIR          Write chat_history.log to DIR (default: off)
    --log-level LEVEL       Console log level (default: INFO)
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from roomchat.server.main_server import main


if __name__ == "__main__":
    main()
