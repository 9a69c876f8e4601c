# -*- coding: utf-8 -*-
"""
Response dispatcher and the delegate fallback chain.

Canned intents are answered immediately from static templates. DelegateToAI
goes to the completion service once, under a timeout; whatever happens there
(timeout, non-2xx, empty or malformed body) the user still gets a reply:

    completion text  →  keyword re-scan  →  "I understand you're asking about: ..."

The delegate attempt is turned into a tagged ``DelegateResult`` and the choice
of fallback is a plain function of (message, result), so it is testable
without any network or event loop.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence

from errors import DelegateError, DelegateTimeout, StationNotFound
from intents import BUTTON_TAGS, fallback_topic
from knowledge import KnowledgeStore
from metro_graph import RouteGraph
from models import ContextEntry, Intent, Reply, RouteQuote
from nlp_utils import contains_any, extract_station_pair, normalize_text
from response_formatters import (
    contextual_reply,
    fare_between_fallback_reply,
    fare_quote_reply,
    fare_reply,
    festival_reply,
    generic_fallback_reply,
    menu_reply,
    route_reply,
    schedule_reply,
    welcome_reply,
)

logger = logging.getLogger(__name__)

OK = "ok"
TIMED_OUT = "timed_out"
FAILED = "failed"


class CompletionService(Protocol):
    def complete(self, message: str, context: str, timeout: float) -> str: ...


@dataclass(frozen=True)
class DelegateResult:
    status: str
    text: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == OK and bool(self.text.strip())


# Which earlier typed query a button press follows up on
_CONTEXT_MATCHERS: Dict[Intent, tuple] = {
    Intent.SHOW_ROUTES: (
        "route",
        lambda e: e.tag in ("station_query", "fare_query")
        or contains_any(normalize_text(e.message), ("station", "route")),
    ),
    Intent.SHOW_FARES: (
        "fare",
        lambda e: e.tag == "fare_query"
        or contains_any(normalize_text(e.message), ("fare", "cost", "price")),
    ),
    Intent.SHOW_SCHEDULE: (
        "schedule",
        lambda e: e.tag == "schedule_info"
        or contains_any(normalize_text(e.message), ("time", "schedule", "hour")),
    ),
}


class ResponseDispatcher:
    def __init__(
        self,
        graph: RouteGraph,
        knowledge: KnowledgeStore,
        completion: CompletionService,
        timeout: float = 10.0,
    ):
        self.graph = graph
        self.knowledge = knowledge
        self.completion = completion
        self.timeout = timeout
        self._canned: Dict[Intent, Callable[[], Reply]] = {
            Intent.GREETING: welcome_reply,
            Intent.SHOW_ROUTES: lambda: route_reply(self.graph),
            Intent.SHOW_FARES: fare_reply,
            Intent.SHOW_SCHEDULE: schedule_reply,
            Intent.SHOW_FESTIVAL: festival_reply,
            Intent.SHOW_MENU: menu_reply,
        }

    # ── canned ────────────────────────────────────────────────────────────────
    def canned(self, intent: Intent, context: Sequence[ContextEntry] = ()) -> Reply:
        """
        Static reply for a canned intent. With context (button presses), the
        reply is personalised with the first earlier typed query on the same topic.
        """
        matcher = _CONTEXT_MATCHERS.get(intent)
        if matcher and context:
            topic, predicate = matcher
            recent = next(
                (e for e in context if e.tag not in BUTTON_TAGS and predicate(e)),
                None,
            )
            if recent is not None:
                return contextual_reply(topic, recent.message, self.graph)
        return self._canned[intent]()

    # ── route graph ───────────────────────────────────────────────────────────
    def _resolve_station(self, name: str) -> str:
        return self.knowledge.canonical_station(name) or name

    def quote_for(self, message: str) -> Optional[RouteQuote]:
        pair = extract_station_pair(message)
        if not pair:
            return None
        origin, destination = (self._resolve_station(p) for p in pair)
        try:
            return self.graph.quote(origin, destination)
        except StationNotFound as e:
            logger.info(f"🚫 Cannot compute fare for '{message[:60]}': {e}")
            return None

    # ── delegate ──────────────────────────────────────────────────────────────
    def build_context(self, message: str) -> str:
        return self.knowledge.build_context(
            message,
            station_reference=self.graph.numbered_listing(),
            quote=self.quote_for(message),
        )

    async def attempt_delegate(self, message: str) -> DelegateResult:
        """One bounded call to the completion service. Never raises."""
        context = self.build_context(message)
        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(self.completion.complete, message, context, self.timeout),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, DelegateTimeout) as e:
            logger.warning(f"⏱️ Completion timed out for '{message[:60]}'")
            return DelegateResult(TIMED_OUT, error=str(e) or "timeout")
        except DelegateError as e:
            logger.warning(f"⚠️ Completion failed for '{message[:60]}': {e}")
            return DelegateResult(FAILED, error=str(e))
        except Exception as e:
            logger.exception("Completion call raised unexpectedly")
            return DelegateResult(FAILED, error=repr(e))
        if not isinstance(text, str):
            return DelegateResult(FAILED, error="non-text completion")
        return DelegateResult(OK, text=text)

    def fallback_reply(self, message: str, result: DelegateResult) -> Reply:
        if result.ok:
            return Reply(result.text.strip(), source="completion")

        topic = fallback_topic(message)
        logger.info(f"↩️ Fallback ({result.status}) topic={topic} for '{message[:60]}'")
        if topic == "fare_between":
            quote = self.quote_for(message)
            if quote is not None:
                return fare_quote_reply(quote)
            return fare_between_fallback_reply(message)
        if topic == "routes":
            return _as_fallback(route_reply(self.graph))
        if topic == "fares":
            return _as_fallback(fare_reply())
        if topic == "schedule":
            return _as_fallback(schedule_reply())
        return generic_fallback_reply(message)

    async def delegate(self, message: str) -> Reply:
        result = await self.attempt_delegate(message)
        return self.fallback_reply(message, result)

    async def dispatch(self, intent: Intent, message: str, context: Sequence[ContextEntry] = ()) -> Reply:
        if intent is Intent.DELEGATE_TO_AI:
            return await self.delegate(message)
        return self.canned(intent, context)


def _as_fallback(reply: Reply) -> Reply:
    return Reply(reply.text, options=reply.options, source="fallback")
