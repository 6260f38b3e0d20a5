#!/usr/bin/env python3
"""
roomchat Client - Main Entry Point

Terminal client for the room.

Usage:
    python main_client.py [--host HOST] [-p PORT] [--nickname NAME]
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from roomchat.client.main_client import main


if __name__ == "__main__":
    main()
