"""Shared fixtures for chat gateway tests."""

import pytest
from chat_gateway.config import ChatConfig
from chat_gateway.errors import UpstreamError


class StubProvider:
    """Stands in for the Gemini client.

    Replies ``Echo: <message>`` by default, or the number of content blocks
    received when ``count_turns`` is set.
    """

    def __init__(self, count_turns=False, fail_with=None):
        self.count_turns = count_turns
        self.fail_with = fail_with
        self.calls = []

    def generate(self, contents, generation_config=None):
        self.calls.append({"contents": contents, "generation_config": generation_config})
        if self.fail_with is not None:
            raise self.fail_with
        if self.count_turns:
            return f"turns={len(contents)}"
        return f"Echo: {contents[-1]['parts'][0]['text']}"


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def config():
    """Config with the background sweep disabled."""
    return ChatConfig(sweep_interval_seconds=0)


@pytest.fixture
def failing_provider():
    return StubProvider(fail_with=UpstreamError("quota exceeded"))
