"""Exceptions raised by the chat gateway."""

from __future__ import annotations


class ChatGatewayError(Exception):
    """Base class for gateway failures."""


class ValidationError(ChatGatewayError, ValueError):
    """The request is missing required input. Maps to a client error."""


class UpstreamError(ChatGatewayError, RuntimeError):
    """The AI provider call failed (network, auth, quota, bad payload)."""
