"""Configuration objects for the chat gateway."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"


@dataclass
class ProviderConfig:
    """Gemini connection details."""

    api_key: Optional[str] = None
    endpoint: str = DEFAULT_GEMINI_ENDPOINT
    model: str = "gemini-2.5-flash"
    request_timeout: int = 60


@dataclass
class ChatConfig:
    """Runtime controls for sessions and generation."""

    llm: ProviderConfig = field(default_factory=ProviderConfig)
    max_output_tokens: int = 1000
    temperature: float = 0.9
    session_ttl_seconds: int = 60 * 60
    sweep_interval_seconds: int = 60 * 60
    max_sessions: int = 10000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    port: int = 3000
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "ChatConfig":
        """Build a config from environment variables (and ``.env`` when present)."""
        if dotenv:
            load_dotenv()

        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            llm=ProviderConfig(
                api_key=os.getenv("GEMINI_API_KEY") or None,
                endpoint=os.getenv("GEMINI_ENDPOINT", DEFAULT_GEMINI_ENDPOINT),
                model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
                request_timeout=int(os.getenv("GEMINI_TIMEOUT", "60")),
            ),
            session_ttl_seconds=int(os.getenv("SESSION_TTL_SECONDS", str(60 * 60))),
            sweep_interval_seconds=int(os.getenv("SWEEP_INTERVAL_SECONDS", str(60 * 60))),
            max_sessions=int(os.getenv("MAX_SESSIONS", "10000")),
            cors_origins=[item.strip() for item in origins.split(",") if item.strip()],
            port=int(os.getenv("PORT", "3000")),
            log_dir=os.getenv("LOG_DIR") or None,
        )
