"""FastAPI entry point for the chat gateway."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import ChatConfig
from .errors import UpstreamError, ValidationError
from .service import ChatService, sweep_sessions_forever
from .utils import setup_logging

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: Optional[str] = Field(None, description="User message to send to the model.")
    history: Optional[List[Any]] = Field(
        None,
        description="Prior {role, content} turns, only used when a new session is started. "
        "Entries without a user or assistant role are ignored.",
    )
    session_id: Optional[str] = Field(None, alias="sessionId", description="Session to continue.")


def create_app(
    chat_config: Optional[ChatConfig] = None,
    *,
    client: Optional[Any] = None,
    log_dir: Optional[str] = None,
) -> FastAPI:
    config = chat_config or ChatConfig()
    if log_dir or config.log_dir:
        setup_logging(log_dir or config.log_dir, logging.INFO)

    service = ChatService(config, client=client)
    if client is None and not config.llm.api_key:
        logger.warning("GEMINI_API_KEY is not set; chat requests will fail until it is configured")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = None
        if config.sweep_interval_seconds > 0:
            task = asyncio.create_task(sweep_sessions_forever(service, config.sweep_interval_seconds))
        yield
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    app = FastAPI(title="Chat Gateway", version="0.1.0", lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": str(exc)})

    @app.get("/")
    async def root() -> Dict[str, str]:
        return {"status": "Middleware server is running"}

    @app.post("/api/chat")
    async def chat(request: ChatRequest):
        try:
            reply = await run_in_threadpool(
                app.state.service.chat,
                request.message,
                history=request.history,
                session_id=request.session_id,
            )
        except ValidationError as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except UpstreamError as exc:
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to get AI response", "details": str(exc)},
            )

        return {"response": reply.response, "sessionId": reply.session_id}

    @app.get("/api/sessions/{session_id}")
    async def session_history(session_id: str):
        try:
            return app.state.service.get_history(session_id)
        except KeyError:
            return JSONResponse(status_code=404, content={"error": "Session not found"})

    @app.delete("/api/sessions/{session_id}")
    async def clear_session(session_id: str) -> Dict[str, str]:
        app.state.service.clear_session(session_id)
        return {"status": "cleared"}

    return app
