"""
In-memory chat session store. Keyed by session_id; history is not sent from frontend.

Each session owns a ConversationMemory (ordered user/assistant messages). Access to
one session is serialized through its own lock so a request's read-history ->
call-model -> append-turn sequence never interleaves with another request for the
same session. Different sessions never block each other.

No eviction: memories live as long as the store. Clearing a session empties its
history but keeps the memory (and its lock) registered.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from ragchat.core.messages import Message, assistant, user

logger = logging.getLogger(__name__)


@dataclass
class ConversationMemory:
    """Ordered turn history for one session. Mutated only through SessionStore.append_turn."""

    session_id: str
    messages: list[Message] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def turn_count(self) -> int:
        return len(self.messages) // 2


class SessionStore:
    """session_id -> ConversationMemory, created lazily on first reference."""

    def __init__(self) -> None:
        self._sessions: dict[str, ConversationMemory] = {}
        self._lock = threading.Lock()

    def get_or_create(self, session_id: str) -> ConversationMemory:
        """Return the memory for session_id, creating an empty one on first use."""
        with self._lock:
            memory = self._sessions.get(session_id)
            if memory is None:
                memory = ConversationMemory(session_id=session_id)
                self._sessions[session_id] = memory
                logger.info("[session_store:get_or_create] created session_id=%s", session_id[:16])
        return memory

    @contextmanager
    def session(self, session_id: str) -> Iterator[ConversationMemory]:
        """Hold the session's lock for the duration of the block."""
        memory = self.get_or_create(session_id)
        with memory.lock:
            yield memory

    def load_history(self, memory: ConversationMemory) -> list[Message]:
        """Return the session's messages in insertion order (copy so caller cannot mutate store)."""
        out = list(memory.messages)
        logger.info("[session_store:load_history] session_id=%s OUT messages=%d", memory.session_id[:16], len(out))
        return out

    def append_turn(self, memory: ConversationMemory, user_text: str, assistant_text: str) -> None:
        """Append one (user, assistant) turn. Call only after a successful model response."""
        memory.messages.extend([user(user_text), assistant(assistant_text or "")])
        logger.info(
            "[session_store:append_turn] session_id=%s turns=%d reply_len=%d",
            memory.session_id[:16], memory.turn_count, len(assistant_text or ""),
        )

    def get_history(self, session_id: str) -> list[Message]:
        """History for session_id without creating the session; [] when unknown."""
        with self._lock:
            memory = self._sessions.get(session_id)
        if memory is None:
            return []
        with memory.lock:
            return list(memory.messages)

    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def clear(self, session_id: str) -> bool:
        """
        Wipe a session's history. Returns True if the session existed.
        Waits for an in-flight request on the session to append its turn first; the
        memory and its lock stay registered so later requests still serialize on it.
        """
        with self._lock:
            memory = self._sessions.get(session_id)
        if memory is None:
            return False
        with memory.lock:
            memory.messages.clear()
        logger.info("[session_store:clear] session_id=%s", session_id[:16])
        return True
