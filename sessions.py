"""
PM Bot - Session Store
Per-chat dialogue state, kept in memory for the life of the process.
"""

import enum
import threading
import time
from dataclasses import dataclass, field
from typing import Optional


def _now():
    return time.monotonic()


class Step(enum.Enum):
    IDLE = "idle"
    AWAITING_ISSUE_NUMBER = "awaiting_issue_number"
    AWAITING_ASSIGNEE = "awaiting_assignee"


@dataclass
class Session:
    step: Step = Step.IDLE
    issue_number: Optional[int] = None
    updated_at: float = field(default=0.0, compare=False)

    def advance(self, step, issue_number=None):
        self.step = step
        self.issue_number = issue_number
        self.updated_at = _now()

    def is_idle(self):
        return self.step is Step.IDLE


class SessionStore:
    """
    chat_id -> Session, created lazily on first access.

    lock(chat_id) hands out one lock per chat so a chat's messages are
    handled one at a time while other chats proceed in parallel.
    """

    def __init__(self, timeout_minutes=0):
        self.timeout_seconds = timeout_minutes * 60
        self._sessions = {}
        self._locks = {}
        self._guard = threading.Lock()

    def lock(self, chat_id):
        with self._guard:
            return self._locks.setdefault(chat_id, threading.Lock())

    def get(self, chat_id):
        session = self._sessions.get(chat_id)
        if session is None or self._expired(session):
            session = self.reset(chat_id)
        return session

    def reset(self, chat_id):
        session = self._sessions[chat_id] = Session(updated_at=_now())
        return session

    def _expired(self, session):
        if not self.timeout_seconds or session.is_idle():
            return False
        return _now() - session.updated_at > self.timeout_seconds

    def __len__(self):
        return len(self._sessions)
