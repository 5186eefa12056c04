"""Chat gateway: proxy chat messages to Gemini with in-memory sessions.

The primary entry points are ``chat_gateway.api.create_app`` for running the
HTTP service and ``chat_gateway.service.ChatService`` for using the gateway
directly from Python code.
"""

from .config import ChatConfig, ProviderConfig
from .errors import ChatGatewayError, UpstreamError, ValidationError
from .service import ChatReply, ChatService

__all__ = [
    "ChatConfig",
    "ProviderConfig",
    "ChatGatewayError",
    "UpstreamError",
    "ValidationError",
    "ChatReply",
    "ChatService",
]
