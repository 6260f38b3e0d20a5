"""
Message definitions for roomchat.

This module defines the events delivered to participants, their canonical
text rendering, and the errors a join attempt can fail with.
"""

import string
from dataclasses import dataclass
from typing import Tuple, Union


NICKNAME_CHARACTERS = frozenset(string.ascii_letters + string.digits)
ROSTER_PREFIX = "* Welcome, the room contains: "


class RoomMessage:
    """Base class for room events. str() of a message is its wire form."""

    def __str__(self):
        return render(self)


@dataclass(frozen=True)
class Joined(RoomMessage):
    """Sent to every participant already in the room when someone joins."""
    nickname: str


@dataclass(frozen=True)
class Left(RoomMessage):
    """Sent to every remaining participant when someone leaves."""
    nickname: str


@dataclass(frozen=True)
class ConnectedUsers(RoomMessage):
    """Sent to a joining participant only, listing who was already present."""
    roster: Tuple[str, ...]


@dataclass(frozen=True)
class Chat(RoomMessage):
    """Chat line from one participant, delivered to everyone else."""
    sender: str
    text: str


Message = Union[Joined, Left, ConnectedUsers, Chat]


def render(message: Message) -> str:
    """
    Render a message as the single line written to a participant.

    Clients match these forms verbatim, so they must not change.
    """
    if isinstance(message, Joined):
        return f"* {message.nickname} joined the room"
    if isinstance(message, Left):
        return f"* {message.nickname} left the room"
    if isinstance(message, ConnectedUsers):
        return ROSTER_PREFIX + ', '.join(message.roster)
    if isinstance(message, Chat):
        return f"[{message.sender}] {message.text}"
    raise TypeError(f"Cannot render {type(message).__name__}")


def is_valid_nickname(nickname: str) -> bool:
    """Check that a nickname is non-empty ASCII letters and digits only."""
    return bool(nickname) and all(c in NICKNAME_CHARACTERS for c in nickname)


class JoinError(Exception):
    """Base class for a rejected join attempt."""

    message = "Unable to join the room."

    def __init__(self, nickname: str):
        super().__init__(self.message)
        self.nickname = nickname

    def __str__(self):
        return self.message


class InvalidNicknameError(JoinError):
    """Nickname is empty or has a character outside [A-Za-z0-9]."""

    message = "Nickname can only alphanumerical characters."


class DuplicateNicknameError(JoinError):
    """Nickname is already used by a participant in the room."""

    message = "Nickname already used."
