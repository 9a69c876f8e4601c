# tests/conftest.py
import time
from datetime import date, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from config import Settings
from context_log import ContextLog
from dedup import DedupWindow
from dispatcher import ResponseDispatcher
from errors import TransportError
from knowledge import KnowledgeStore
from main import create_app
from metro_graph import RouteGraph
from models import InboundMessage, MessageKind
from router import MessageRouter
from session_manager import SessionTracker

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


# --- Fakes ---

class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCalendar:
    def __init__(self, start: date = date(2025, 9, 1)):
        self.day = start

    def __call__(self) -> date:
        return self.day

    def advance(self, days: int = 1) -> None:
        self.day += timedelta(days=days)


class FakeCompletion:
    """Stands in for the OpenAI-backed client; records every call."""

    def __init__(self, reply: str = "🤖 Take the Purple Line.", exc: Exception = None, delay: float = 0.0):
        self.reply = reply
        self.exc = exc
        self.delay = delay
        self.calls = []

    def complete(self, message: str, context: str, timeout: float) -> str:
        self.calls.append((message, context, timeout))
        if self.delay:
            time.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.reply


class FakeTransport:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def send_text(self, to, text):
        if self.fail:
            raise TransportError("HTTP 500", 500)
        self.sent.append(("text", to, text, ()))

    def send_quick_replies(self, to, text, options):
        if self.fail:
            raise TransportError("HTTP 500", 500)
        self.sent.append(("quick_replies", to, text, tuple(options)))


def text_msg(body: str, sender: str = "919800000001") -> InboundMessage:
    return InboundMessage(sender=sender, kind=MessageKind.TEXT, body=body)


def button_msg(button_id: str, sender: str = "919800000001") -> InboundMessage:
    return InboundMessage(sender=sender, kind=MessageKind.BUTTON, body=button_id)


# --- Fixtures ---

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def graph():
    return RouteGraph.default()


@pytest.fixture
def knowledge():
    return KnowledgeStore.load(
        str(DATA_DIR / "pune_metro_knowledge.json"),
        str(DATA_DIR / "faq_qa.jsonl"),
        str(DATA_DIR / "station_synonyms.json"),
    )


@pytest.fixture
def completion():
    return FakeCompletion()


@pytest.fixture
def dispatcher(graph, knowledge, completion):
    return ResponseDispatcher(graph=graph, knowledge=knowledge, completion=completion, timeout=1.0)


@pytest.fixture
def router(dispatcher, clock, calendar):
    return MessageRouter(
        dispatcher=dispatcher,
        dedup=DedupWindow(clock=clock),
        sessions=SessionTracker(today=calendar),
        context=ContextLog(clock=clock),
    )


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(router, transport):
    settings = Settings(_env_file=None, ALLOWED_ORIGINS="http://localhost:3000")
    return TestClient(create_app(settings=settings, router=router, transport=transport))
