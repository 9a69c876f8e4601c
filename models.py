# models.py
"""Value types that flow through one routing pass."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel


class MessageKind(str, Enum):
    TEXT = "text"
    BUTTON = "button"


class Intent(str, Enum):
    GREETING = "Greeting"
    SHOW_ROUTES = "ShowRoutes"
    SHOW_FARES = "ShowFares"
    SHOW_SCHEDULE = "ShowSchedule"
    SHOW_FESTIVAL = "ShowFestival"
    SHOW_MENU = "ShowMenu"
    DELEGATE_TO_AI = "DelegateToAI"


_BUTTON_ID_RE = re.compile(r"^(?:qr|btn)_(\d+)$")


@dataclass(frozen=True)
class InboundMessage:
    sender: str
    kind: MessageKind
    body: str
    received_at: float = 0.0

    @property
    def button_index(self) -> Optional[int]:
        """Slot index of a button reply id such as ``qr_2``; None when unparsable."""
        if self.kind is not MessageKind.BUTTON:
            return None
        m = _BUTTON_ID_RE.match((self.body or "").strip())
        return int(m.group(1)) if m else None


@dataclass(frozen=True)
class Reply:
    text: str
    options: Tuple[str, ...] = ()
    source: str = "canned"  # canned | completion | fallback

    @property
    def is_menu(self) -> bool:
        return bool(self.options)


@dataclass(frozen=True)
class Classification:
    intent: Intent
    tag: str


@dataclass(frozen=True)
class ContextEntry:
    sender: str
    message: str
    tag: str
    at: float


@dataclass(frozen=True)
class Suppressed:
    key: str


@dataclass(frozen=True)
class Replied:
    reply: Reply
    intent: Intent


@dataclass(frozen=True)
class Delegated:
    reply: Reply
    intent: Intent = Intent.DELEGATE_TO_AI


Outcome = Union[Suppressed, Replied, Delegated]


@dataclass(frozen=True)
class RouteQuote:
    origin: str
    destination: str
    stations: int
    fare: int
    minutes: float
    transfer: bool


# ──────────────────────────────────────────────────────────────────────────────
# HTTP payloads

class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    response: str
    source: str = "completion"


def parse_webhook(payload: Dict[str, Any], *, received_at: float = 0.0) -> Optional[InboundMessage]:
    """
    Pull the first message out of a WhatsApp Cloud API webhook body.
    Returns None for status callbacks and anything that is not text or a button reply.
    """
    if not isinstance(payload, dict) or payload.get("object") != "whatsapp_business_account":
        return None
    try:
        value = payload["entry"][0]["changes"][0]["value"]
        message = value["messages"][0]
    except (KeyError, IndexError, TypeError):
        return None

    sender = str(message.get("from") or "").strip()
    mtype = message.get("type")
    if not sender:
        return None

    if mtype == "text":
        body = (message.get("text") or {}).get("body") or ""
        if not body.strip():
            return None
        return InboundMessage(sender=sender, kind=MessageKind.TEXT, body=body, received_at=received_at)

    if mtype == "interactive":
        interactive = message.get("interactive") or {}
        itype = interactive.get("type")
        # button_reply for reply buttons, list_reply for the 4-option menu
        if itype in ("button_reply", "list_reply"):
            reply = interactive.get(itype) or {}
            if reply.get("id"):
                return InboundMessage(
                    sender=sender, kind=MessageKind.BUTTON, body=str(reply["id"]), received_at=received_at
                )
    return None
