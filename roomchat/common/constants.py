"""
Shared constants for the roomchat server and client.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 5555

# Line protocol
ENCODING = 'utf-8'
LINE_TERMINATOR = '\n'
WELCOME_PROMPT = 'Welcome to our chat room, please enter your nickname:'

# Buffer Sizes
MAX_LINE_BYTES = 1024 * 1024  # Longer inbound lines are dropped
OUTBOUND_QUEUE_SIZE = 256  # Pending messages per participant before drops
RELAY_FLUSH_TIMEOUT = 5.0  # Seconds a leaving participant's relay may spend flushing

# Logging
LOG_LEVEL = 'INFO'
CHAT_LOG_FILE = 'chat_history.log'
