# file: config.py
from __future__ import annotations

import json
from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "dev"
    # Accept comma-separated string, JSON array, list or empty
    ALLOWED_ORIGINS: Union[str, List[str], None] = None

    # Completion service (OpenAI)
    OPENAI_API_KEY: Optional[str] = None
    LLM_MODEL: str = "gpt-3.5-turbo"
    LLM_MAX_TOKENS: int = 500
    LLM_TEMPERATURE: float = 0.7
    COMPLETION_TIMEOUT_SEC: float = 10.0

    # Dedup window
    DEDUP_CAPACITY: int = 100
    DEDUP_REPEAT_WINDOW_SEC: float = 5.0
    DEDUP_HORIZON_SEC: float = 30.0

    # Greeting sessions
    SESSION_MAX_ENTRIES: int = 1000
    SESSION_RETENTION_DAYS: int = 30

    # Conversation context
    CONTEXT_MAX_ENTRIES: int = 5
    CONTEXT_TTL_SEC: float = 3600.0
    CONTEXT_LOOKBACK: int = 3

    # Knowledge files (read-only at call time)
    KNOWLEDGE_PATH: str = "data/pune_metro_knowledge.json"
    FAQ_PATH: str = "data/faq_qa.jsonl"
    SYNONYMS_PATH: str = "data/station_synonyms.json"

    # WhatsApp Cloud API
    WHATSAPP_ACCESS_TOKEN: Optional[str] = None
    WHATSAPP_PHONE_NUMBER_ID: Optional[str] = None
    WHATSAPP_API_VERSION: str = "v18.0"
    WHATSAPP_BASE_URL: str = "https://graph.facebook.com"
    WHATSAPP_TIMEOUT_SEC: int = 10

    MAX_MESSAGE_CHARS: int = 2000

    # Important: ignore extra env vars (WHATSAPP_VERIFY_TOKEN, PORT, etc.)
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def _parse_origins(cls, v):
        if v is None or v == "":
            return []
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                try:
                    parsed = json.loads(s)
                except ValueError:
                    parsed = None
                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]
            return [s2.strip() for s2 in s.split(",") if s2.strip()]
        return v
