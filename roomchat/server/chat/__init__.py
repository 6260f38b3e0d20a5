"""
Chat module for the server-side room.

Handles:
- Participant registration and nickname checks
- Presence notifications (joined/left)
- Chat message fan-out
"""
