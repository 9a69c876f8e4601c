# file: router.py
"""
Inbound-message router: the single entry point ``route(InboundMessage) -> Outcome``.

Owns all mutable per-process state (dedup window, greeting sessions, context
log). Each table has its own lock and none is held while the delegate call is
in flight. Sending the reply is the caller's job.
"""
from __future__ import annotations

import logging
from typing import Optional

from api_clients import CompletionClient
from config import Settings
from context_log import ContextLog
from dedup import DedupWindow, dedup_key
from dispatcher import CompletionService, ResponseDispatcher
from intents import IntentClassifier
from knowledge import KnowledgeStore
from metro_graph import RouteGraph
from models import Delegated, InboundMessage, Intent, MessageKind, Outcome, Replied, Suppressed
from nlp_utils import is_genuine_greeting, normalize_text
from session_manager import SessionTracker

logger = logging.getLogger(__name__)


class MessageRouter:
    def __init__(
        self,
        dispatcher: ResponseDispatcher,
        dedup: Optional[DedupWindow] = None,
        sessions: Optional[SessionTracker] = None,
        context: Optional[ContextLog] = None,
        classifier: Optional[IntentClassifier] = None,
        context_lookback: int = 3,
    ):
        self.dispatcher = dispatcher
        # Empty tables are falsy (__len__), compare against None
        self.dedup = dedup if dedup is not None else DedupWindow()
        self.sessions = sessions if sessions is not None else SessionTracker()
        self.context = context if context is not None else ContextLog()
        self.classifier = classifier if classifier is not None else IntentClassifier()
        self.context_lookback = context_lookback

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        completion: Optional[CompletionService] = None,
        knowledge: Optional[KnowledgeStore] = None,
    ) -> "MessageRouter":
        knowledge = knowledge if knowledge is not None else KnowledgeStore.load(
            settings.KNOWLEDGE_PATH, settings.FAQ_PATH, settings.SYNONYMS_PATH
        )
        dispatcher = ResponseDispatcher(
            graph=RouteGraph.default(),
            knowledge=knowledge,
            completion=completion if completion is not None else CompletionClient.from_settings(settings),
            timeout=settings.COMPLETION_TIMEOUT_SEC,
        )
        return cls(
            dispatcher=dispatcher,
            dedup=DedupWindow(
                capacity=settings.DEDUP_CAPACITY,
                repeat_window=settings.DEDUP_REPEAT_WINDOW_SEC,
                horizon=settings.DEDUP_HORIZON_SEC,
            ),
            sessions=SessionTracker(
                max_entries=settings.SESSION_MAX_ENTRIES,
                retention_days=settings.SESSION_RETENTION_DAYS,
            ),
            context=ContextLog(
                max_entries=settings.CONTEXT_MAX_ENTRIES,
                ttl=settings.CONTEXT_TTL_SEC,
            ),
            context_lookback=settings.CONTEXT_LOOKBACK,
        )

    def _greeting_due(self, message: InboundMessage) -> bool:
        if message.kind is not MessageKind.TEXT:
            return False
        # Only a genuine greeting consumes today's greeting slot
        return is_genuine_greeting(normalize_text(message.body)) and self.sessions.should_greet(message.sender)

    async def route(self, message: InboundMessage) -> Outcome:
        if not self.dedup.should_process(message):
            return Suppressed(dedup_key(message))

        is_button = message.kind is MessageKind.BUTTON
        greeting_due = self._greeting_due(message)
        result = self.classifier.classify(
            message.body,
            greeting_due=greeting_due,
            is_button=is_button,
            button_index=message.button_index,
        )

        # Context read before this message is recorded
        history = self.context.recent_intents(message.sender, self.context_lookback) if is_button else []
        self.context.record(message.sender, message.body, result.tag)

        reply = await self.dispatcher.dispatch(result.intent, message.body, history)
        logger.info(f"✅ {message.sender}: {result.intent.value} → {reply.source} reply ({len(reply.text)} chars)")
        if result.intent is Intent.DELEGATE_TO_AI:
            return Delegated(reply)
        return Replied(reply, result.intent)
