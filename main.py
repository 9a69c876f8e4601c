# file: main.py
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api_clients import WhatsAppClient
from config import Settings
from errors import TransportError
from models import ChatRequest, ChatResponse, Delegated, Replied, Suppressed, parse_webhook
from router import MessageRouter

# ──────────────────────────────────────────────────────────────────────────────
# .env + logging
load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _origins(settings: Settings) -> list:
    return list(settings.ALLOWED_ORIGINS or []) or ["http://localhost:3000"]


def create_app(
    settings: Optional[Settings] = None,
    router: Optional[MessageRouter] = None,
    transport: Optional[WhatsAppClient] = None,
) -> FastAPI:
    if settings is None:
        settings = Settings()
    if router is None:
        router = MessageRouter.from_settings(settings)
    if transport is None:
        transport = WhatsAppClient.from_settings(settings)

    app = FastAPI(title="Pune Metro Assistant")
    app.state.settings = settings
    app.state.router = router
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_origins(settings),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    @app.get("/health")
    def health():
        return {"status": "ok", **router.dispatcher.knowledge.stats()}

    @app.post("/webhook")
    async def webhook(request: Request):
        try:
            payload: Dict[str, Any] = await request.json()
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Invalid JSON"})

        message = parse_webhook(payload, received_at=time.time())
        if message is None:
            # status callbacks, media, etc.
            return {"status": "ignored"}

        outcome = await router.route(message)
        if isinstance(outcome, Suppressed):
            return {"status": "duplicate"}

        reply = outcome.reply
        try:
            if reply.is_menu:
                await run_in_threadpool(transport.send_quick_replies, message.sender, reply.text, reply.options)
            else:
                await run_in_threadpool(transport.send_text, message.sender, reply.text)
        except TransportError as e:
            logger.error(f"❌ Outbound send to {message.sender} failed: {e}")
            return {"status": "send_failed", "intent": _intent_of(outcome)}
        return {"status": "sent", "intent": _intent_of(outcome)}

    @app.post("/chat", response_model=ChatResponse)
    async def chat_endpoint(body: ChatRequest):
        text = (body.message or "").strip()
        if not text:
            return JSONResponse(status_code=400, content={"error": "Message is required"})
        if len(text) > settings.MAX_MESSAGE_CHARS:
            return JSONResponse(status_code=413, content={"error": "Message too long"})
        reply = await router.dispatcher.delegate(text)
        return ChatResponse(response=reply.text, source=reply.source)

    return app


def _intent_of(outcome) -> str:
    if isinstance(outcome, (Replied, Delegated)):
        return outcome.intent.value
    return ""


# `uvicorn main:app`
app = create_app()
