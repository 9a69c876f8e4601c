# file: knowledge.py
"""
Read-only knowledge store handed to the completion service as context.

Three flat files: the structured knowledge base (JSON), FAQ entries (JSON
lines) and a station synonym table (JSON object: station -> [synonyms]).
Editing them is an admin concern; the router only reads.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema

from constants import CONTEXT_FOOTER, FARE_RULES_TEXT
from models import RouteQuote

logger = logging.getLogger(__name__)

FAQ_ENTRY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "q": {"type": "string", "minLength": 1},
        "a": {"type": "string", "minLength": 1},
        "tags": {"type": "array", "items": {"type": "string"}},
        "evidence": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["q", "a"],
}

SYNONYMS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {"type": "array", "items": {"type": "string"}},
}


@dataclass
class KnowledgeStore:
    knowledge: Dict[str, Any] = field(default_factory=dict)
    faq: List[Dict[str, Any]] = field(default_factory=list)
    synonyms: Dict[str, List[str]] = field(default_factory=dict)

    @classmethod
    def load(cls, knowledge_path: str, faq_path: str, synonyms_path: str) -> "KnowledgeStore":
        store = cls(
            knowledge=_read_json(Path(knowledge_path), default={}),
            faq=_read_faq(Path(faq_path)),
            synonyms=_read_synonyms(Path(synonyms_path)),
        )
        logger.info(
            f"✅ Knowledge loaded: {len(store.knowledge)} sections, "
            f"{len(store.faq)} FAQ entries, {len(store.synonyms)} synonym sets"
        )
        return store

    def canonical_station(self, name: str) -> Optional[str]:
        """Station name for a synonym (case-insensitive exact match), else None."""
        key = (name or "").strip().lower()
        if not key:
            return None
        for station, aliases in self.synonyms.items():
            if key == station.lower() or key in (a.lower() for a in aliases):
                return station
        return None

    def build_context(
        self,
        message: str,
        station_reference: str = "",
        quote: Optional[RouteQuote] = None,
    ) -> str:
        parts = [
            "Pune Metro Knowledge Base:",
            json.dumps(self.knowledge, indent=2, ensure_ascii=False),
            "",
            "FAQ Data:",
            json.dumps(self.faq, indent=2, ensure_ascii=False),
            "",
            "Station Synonyms:",
            json.dumps(self.synonyms, indent=2, ensure_ascii=False),
            "",
            f"User Question: {message}",
        ]
        if station_reference:
            parts += ["", "STATION NUMBERING REFERENCE:", station_reference]
        parts += ["", FARE_RULES_TEXT]
        if quote is not None:
            via = " (change lines at the interchange)" if quote.transfer else ""
            parts += [
                "",
                "COMPUTED ROUTE ESTIMATE:",
                f"- {quote.origin} to {quote.destination}: {quote.stations} stations{via}, "
                f"fare ₹{quote.fare}, about {quote.minutes:g} minutes",
            ]
        parts += ["", CONTEXT_FOOTER]
        return "\n".join(parts)

    def stats(self) -> Dict[str, int]:
        return {
            "knowledgeBase": len(self.knowledge),
            "faqCount": len(self.faq),
            "synonymsCount": len(self.synonyms),
        }


def _read_json(path: Path, default: Any) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        logger.exception(f"❌ Could not load {path}, using empty data")
        return default


def _read_faq(path: Path) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = [ln for ln in f.read().splitlines() if ln.strip()]
    except OSError:
        logger.exception(f"❌ Could not load {path}, using empty FAQ")
        return []

    entries: List[Dict[str, Any]] = []
    for lineno, line in enumerate(lines, start=1):
        try:
            entry = json.loads(line)
            jsonschema.validate(entry, FAQ_ENTRY_SCHEMA)
        except (ValueError, jsonschema.ValidationError) as e:
            logger.warning(f"⚠️ Skipping FAQ line {lineno} in {path}: {e}")
            continue
        entries.append(entry)
    return entries


def _read_synonyms(path: Path) -> Dict[str, List[str]]:
    data = _read_json(path, default={})
    try:
        jsonschema.validate(data, SYNONYMS_SCHEMA)
    except jsonschema.ValidationError as e:
        logger.error(f"❌ Invalid synonyms file {path}: {e.message}")
        return {}
    return data
