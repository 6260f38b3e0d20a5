"""
Chat room module.

This module holds the shared membership table of the room and the
join/leave/send operations over it. Every operation runs under one lock, so
the events seen by any participant are totally ordered.

A sink is anything with a non-blocking ``put_nowait(message)`` method, such
as an ``asyncio.Queue`` or ``queue.Queue``. Any exception it raises is a
delivery failure: it is logged and the message is dropped for that
participant only.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from roomchat.common.messages import (
    Chat, ConnectedUsers, DuplicateNicknameError, InvalidNicknameError,
    Joined, Left, Message, is_valid_nickname
)
from roomchat.server.utils.logger import logger


@dataclass
class Participant:
    """Registry-side record of one participant."""
    session_id: int
    nickname: str
    sink: Any
    joined_at: str = field(default_factory=lambda: datetime.now().isoformat())


class Session:
    """
    Handle for one joined participant.

    Use it as a context manager so the participant leaves the room however
    the connection ends.
    """

    def __init__(self, room: 'ChatRoom', session_id: int, nickname: str):
        self.room = room
        self.session_id = session_id
        self.nickname = nickname
        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def active(self) -> bool:
        return not self._closed and self.room.is_registered(self.session_id)

    def send_message(self, text: str) -> int:
        """Send a chat line to every other participant."""
        return self.room.send_message(self.session_id, text)

    def leave(self) -> bool:
        """Leave the room. Only the first call has any effect."""
        with self._close_lock:
            if self._closed:
                return False
            self._closed = True
        return self.room.leave(self.session_id)

    close = leave

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.leave()
        return False

    def __repr__(self):
        return f"Session(session_id={self.session_id}, nickname={self.nickname!r})"


SessionRef = Union[Session, int]


class ChatRoom:
    """Shared session registry and broadcast engine for a single room."""

    def __init__(self):
        self.participants: Dict[int, Participant] = {}  # session_id -> participant
        self.next_session_id = 1
        self.lock = threading.Lock()  # Guards participants and next_session_id

    def join(self, nickname: str, sink) -> Session:
        """
        Register a participant under ``nickname``.

        The joiner receives the current roster, everyone already present
        receives a Joined notification, then the record is inserted. All of
        it happens under the room lock.

        Raises:
            InvalidNicknameError: nickname is empty or not ASCII alphanumeric.
            DuplicateNicknameError: nickname is used by a live participant.
        """
        if not is_valid_nickname(nickname):
            raise InvalidNicknameError(nickname)

        with self.lock:
            if any(p.nickname == nickname for p in self.participants.values()):
                raise DuplicateNicknameError(nickname)

            roster = tuple(p.nickname for p in self.participants.values())
            self._deliver(nickname, sink, ConnectedUsers(roster))

            joined = Joined(nickname)
            for participant in self.participants.values():
                self._deliver(participant.nickname, participant.sink, joined)

            session_id = self._get_next_session_id()
            self.participants[session_id] = Participant(session_id, nickname, sink)
            logger.log_join(nickname, session_id)

        return Session(self, session_id, nickname)

    def leave(self, session: SessionRef) -> bool:
        """
        Remove a participant and tell everyone left.

        Unknown or already removed sessions are ignored. Returns True when a
        record was removed.
        """
        session_id = self._session_id(session)

        with self.lock:
            participant = self.participants.pop(session_id, None)
            if participant is None:
                return False

            left = Left(participant.nickname)
            for other in self.participants.values():
                self._deliver(other.nickname, other.sink, left)
            logger.log_leave(participant.nickname, session_id, participant.joined_at)

        return True

    def send_message(self, session: SessionRef, text: str) -> int:
        """
        Deliver a chat line from ``session`` to every other participant.

        Does nothing if the session is not registered. Returns the number of
        participants the line was queued for.
        """
        session_id = self._session_id(session)

        with self.lock:
            sender = self.participants.get(session_id)
            if sender is None:
                return 0

            chat = Chat(sender.nickname, text)
            delivered = 0
            for participant in self.participants.values():
                if participant.session_id == session_id:
                    continue
                if self._deliver(participant.nickname, participant.sink, chat):
                    delivered += 1
            logger.log_chat(sender.nickname, session_id, text)

        return delivered

    def get_roster(self) -> List[str]:
        """Get the nicknames of all participants, in join order."""
        with self.lock:
            return [p.nickname for p in self.participants.values()]

    def get_participant_count(self) -> int:
        """Get the number of current participants."""
        with self.lock:
            return len(self.participants)

    def is_registered(self, session: SessionRef) -> bool:
        with self.lock:
            return self._session_id(session) in self.participants

    def get_participant(self, session: SessionRef) -> Optional[Participant]:
        with self.lock:
            return self.participants.get(self._session_id(session))

    def _get_next_session_id(self) -> int:
        # Caller holds self.lock
        session_id = self.next_session_id
        self.next_session_id += 1
        return session_id

    def _session_id(self, session: SessionRef) -> Optional[int]:
        if isinstance(session, Session):
            # A handle from another room never matches a participant here
            return session.session_id if session.room is self else None
        return session

    @staticmethod
    def _deliver(nickname: str, sink, message: Message) -> bool:
        """Queue a message on a sink without blocking. Failures are logged and dropped."""
        try:
            sink.put_nowait(message)
            return True
        except Exception as e:
            logger.log_delivery_failure(nickname, e)
            return False
