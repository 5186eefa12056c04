"""Tests for conversation contexts and the session store."""

import time

import pytest
from chat_gateway.errors import UpstreamError
from chat_gateway.session import ROLE_MODEL, ROLE_USER, ConversationContext, SessionStore, Turn

from conftest import StubProvider


def make_context(session_id, client=None, created_at=None):
    context = ConversationContext(session_id=session_id, client=client or StubProvider())
    if created_at is not None:
        context.created_at = created_at
    return context


class TestConversationContext:
    """Test turn accumulation on a single context."""

    def test_send_message_records_both_turns(self, provider):
        context = make_context("abc", provider)

        assert context.send_message("Hello") == "Echo: Hello"
        assert context.turns == [Turn(ROLE_USER, "Hello"), Turn(ROLE_MODEL, "Echo: Hello")]

    def test_prior_turns_are_replayed(self):
        provider = StubProvider(count_turns=True)
        context = make_context("abc", provider)

        assert context.send_message("one") == "turns=1"
        assert context.send_message("two") == "turns=3"
        roles = [block["role"] for block in provider.calls[-1]["contents"]]
        assert roles == ["user", "model", "user"]

    def test_generation_config_is_forwarded(self, provider):
        context = make_context("abc", provider)
        context.send_message("hi")

        assert provider.calls[0]["generation_config"] == {"maxOutputTokens": 1000, "temperature": 0.9}

    def test_failed_call_leaves_turns_untouched(self, failing_provider):
        context = make_context("abc", failing_provider)

        with pytest.raises(UpstreamError):
            context.send_message("Hello")
        assert context.turns == []

    def test_to_dict_uses_client_roles(self, provider):
        context = make_context("abc", provider)
        context.send_message("Hello")

        payload = context.to_dict()
        assert payload["sessionId"] == "abc"
        assert payload["messages"] == [
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Echo: Hello"},
        ]


class TestSessionStore:
    """Test store access, sweeping and the capacity bound."""

    def test_get_missing_returns_none(self):
        assert SessionStore().get("nope") is None

    def test_put_then_get(self):
        store = SessionStore()
        context = make_context("abc")
        store.put("abc", context)

        assert store.get("abc") is context
        assert "abc" in store
        assert len(store) == 1

    def test_put_replaces_existing_entry(self):
        store = SessionStore()
        store.put("abc", make_context("abc"))
        replacement = make_context("abc")
        store.put("abc", replacement)

        assert len(store) == 1
        assert store.get("abc") is replacement

    def test_sweep_removes_old_and_keeps_new(self):
        store = SessionStore()
        now = time.time()
        store.put("old", make_context("old", created_at=now - 2 * 3600))
        store.put("new", make_context("new", created_at=now - 60))

        removed = store.sweep(3600, now=now)

        assert removed == 1
        assert store.get("old") is None
        assert store.get("new") is not None

    def test_sweep_handles_non_numeric_identifiers(self):
        store = SessionStore()
        now = time.time()
        store.put("my-session", make_context("my-session", created_at=now - 7200))

        assert store.sweep(3600, now=now) == 1
        assert "my-session" not in store

    def test_capacity_evicts_least_recently_used(self):
        store = SessionStore(max_sessions=2)
        store.put("a", make_context("a"))
        store.put("b", make_context("b"))
        store.get("a")
        store.put("c", make_context("c"))

        assert store.session_ids() == ["a", "c"]

    def test_zero_capacity_is_unbounded(self):
        store = SessionStore(max_sessions=0)
        for idx in range(50):
            store.put(str(idx), make_context(str(idx)))

        assert len(store) == 50

    def test_remove(self):
        store = SessionStore()
        store.put("abc", make_context("abc"))

        assert store.remove("abc") is True
        assert store.remove("abc") is False
