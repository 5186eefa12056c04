"""High level orchestration for proxied chat sessions."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from .config import ChatConfig
from .errors import UpstreamError, ValidationError
from .llm_client import GeminiClient
from .session import ROLE_MODEL, ROLE_USER, ConversationContext, SessionStore, Turn

logger = logging.getLogger(__name__)

_ROLE_MAP = {"user": ROLE_USER, "assistant": ROLE_MODEL}


@dataclass
class ChatReply:
    response: str
    session_id: str


def translate_history(history: Optional[Iterable[Any]]) -> List[Turn]:
    """Convert client ``{role, content}`` entries into provider turns.

    Only ``user`` and ``assistant`` roles survive; everything else is dropped.
    """
    turns: List[Turn] = []
    for entry in history or []:
        if not isinstance(entry, Mapping):
            continue
        role = _ROLE_MAP.get(entry.get("role"))
        if role is None:
            continue
        content = entry.get("content")
        turns.append(Turn(role, "" if content is None else str(content)))
    return turns


def new_session_id() -> str:
    return uuid.uuid4().hex


class ChatService:
    """Core chat engine used by the API and direct Python consumers."""

    def __init__(
        self,
        config: Optional[ChatConfig] = None,
        *,
        client: Optional[Any] = None,
        store: Optional[SessionStore] = None,
    ) -> None:
        self.config = config or ChatConfig()
        self.client = client or GeminiClient(self.config.llm)
        self.store = store or SessionStore(self.config.max_sessions)

    def chat(
        self,
        message: Optional[str],
        *,
        history: Optional[Iterable[Any]] = None,
        session_id: Optional[str] = None,
    ) -> ChatReply:
        """Send ``message`` within the session and return the generated reply."""
        if not isinstance(message, str) or not message:
            raise ValidationError("Message is required")

        context = self.store.get(session_id) if session_id else None
        if context is not None:
            logger.info("Continuing session %s (%d turn(s))", context.session_id, len(context.turns))
        else:
            context = self._create_context(session_id or new_session_id(), history)

        try:
            text = context.send_message(message)
        except UpstreamError:
            logger.exception("Provider call failed for session %s", context.session_id)
            raise
        except Exception as exc:
            logger.exception("Provider call failed for session %s", context.session_id)
            raise UpstreamError(str(exc)) from exc

        return ChatReply(response=text, session_id=context.session_id)

    def get_history(self, session_id: str) -> dict:
        """Return the recorded conversation for a live session."""
        context = self.store.get(session_id)
        if context is None:
            raise KeyError(session_id)
        return context.to_dict()

    def clear_session(self, session_id: str) -> bool:
        removed = self.store.remove(session_id)
        if removed:
            logger.info("Cleared session %s", session_id)
        return removed

    def sweep(self) -> int:
        return self.store.sweep(self.config.session_ttl_seconds)

    def _create_context(self, session_id: str, history: Optional[Iterable[Any]]) -> ConversationContext:
        turns = translate_history(history)
        context = ConversationContext(
            session_id=session_id,
            client=self.client,
            turns=turns,
            max_output_tokens=self.config.max_output_tokens,
            temperature=self.config.temperature,
        )
        self.store.put(session_id, context)
        logger.info("Created session %s with %d history turn(s)", session_id, len(turns))
        return context


async def sweep_sessions_forever(service: ChatService, interval: float) -> None:
    """Periodically expire old sessions until cancelled."""
    while True:
        await asyncio.sleep(interval)
        try:
            service.sweep()
        except Exception:
            logger.exception("Session sweep failed")
