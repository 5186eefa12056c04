"""Conversation contexts and the in-memory session store."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_MODEL = "model"


@dataclass
class Turn:
    role: str
    content: str

    def to_content(self) -> Dict[str, object]:
        """Return the turn in Gemini ``contents`` format."""
        return {"role": self.role, "parts": [{"text": self.content}]}

    def to_dict(self) -> Dict[str, str]:
        role = "assistant" if self.role == ROLE_MODEL else self.role
        return {"role": role, "content": self.content}


@dataclass
class ConversationContext:
    """Accumulated turns and generation parameters for one session.

    The provider is stateless, so the context replays every prior turn on each
    call. Turns are only appended after a successful generation.
    """

    session_id: str
    client: Any = field(repr=False)
    turns: List[Turn] = field(default_factory=list)
    max_output_tokens: int = 1000
    temperature: float = 0.9
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def generation_config(self) -> Dict[str, object]:
        return {"maxOutputTokens": self.max_output_tokens, "temperature": self.temperature}

    def send_message(self, message: str) -> str:
        """Send ``message`` with the prior turns and record the exchange."""
        with self._lock:
            user_turn = Turn(ROLE_USER, message)
            contents = [turn.to_content() for turn in self.turns]
            contents.append(user_turn.to_content())

            text = self.client.generate(contents, generation_config=self.generation_config)

            self.turns.append(user_turn)
            self.turns.append(Turn(ROLE_MODEL, text))
            self.updated_at = time.time()
            return text

    def to_dict(self) -> Dict[str, object]:
        return {
            "sessionId": self.session_id,
            "messages": [turn.to_dict() for turn in self.turns],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class SessionStore:
    """Thread-safe map of session id to :class:`ConversationContext`.

    ``max_sessions`` bounds the store; the least recently used entry is
    evicted when a ``put`` goes over. ``0`` means unbounded.
    """

    def __init__(self, max_sessions: int = 0) -> None:
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ConversationContext]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def get(self, session_id: str) -> Optional[ConversationContext]:
        with self._lock:
            context = self._sessions.get(session_id)
            if context is not None:
                self._sessions.move_to_end(session_id)
            return context

    def put(self, session_id: str, context: ConversationContext) -> None:
        with self._lock:
            self._sessions[session_id] = context
            self._sessions.move_to_end(session_id)
            while self.max_sessions and len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted least recently used session %s (max_sessions=%d)", evicted, self.max_sessions)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def sweep(self, max_age: float, *, now: Optional[float] = None) -> int:
        """Drop every session created more than ``max_age`` seconds ago."""
        cutoff = (time.time() if now is None else now) - max_age
        with self._lock:
            expired = [sid for sid, context in self._sessions.items() if context.created_at < cutoff]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info("Swept %d expired session(s)", len(expired))
        return len(expired)
