import logging
from typing import Any, Dict, Optional, Sequence

import requests
from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI, OpenAIError

from config import Settings
from constants import SYSTEM_PROMPT
from errors import (
    DelegateMalformedResponse,
    DelegateServiceError,
    DelegateTimeout,
    TransportError,
)

logger = logging.getLogger(__name__)

# WhatsApp Cloud API limits
BUTTON_TITLE_MAX = 20
MAX_REPLY_BUTTONS = 3
LIST_ROW_TITLE_MAX = 24
LIST_BUTTON_LABEL = "Options"
LIST_SECTION_TITLE = "Pune Metro"


# ===================== COMPLETION SERVICE =====================

class CompletionClient:
    """
    Single-attempt chat completion with the knowledge context as the user turn.
    No SDK retries: a failure here goes straight to the canned fallback.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-3.5-turbo",
        max_tokens: int = 500,
        temperature: float = 0.7,
        system_prompt: str = SYSTEM_PROMPT,
        client: Optional[OpenAI] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.system_prompt = system_prompt
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "CompletionClient":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.LLM_MODEL,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
        )

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise DelegateServiceError("OPENAI_API_KEY is not configured")
            self._client = OpenAI(api_key=self.api_key, max_retries=0)
        return self._client

    def complete(self, message: str, context: str, timeout: float) -> str:
        client = self._get_client()
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": context},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                timeout=timeout,
            )
        except APITimeoutError as e:
            raise DelegateTimeout(f"completion timed out after {timeout}s") from e
        except APIStatusError as e:
            raise DelegateServiceError(f"completion service returned {e.status_code}") from e
        except (APIConnectionError, OpenAIError) as e:
            raise DelegateServiceError(str(e)) from e

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise DelegateMalformedResponse("completion response has no choices") from e
        if not isinstance(content, str) or not content.strip():
            raise DelegateMalformedResponse("completion response is empty")
        logger.info(f"🤖 Completion received for '{message[:60]}' ({len(content)} chars)")
        return content.strip()


# ===================== WHATSAPP TRANSPORT =====================

class WhatsAppClient:
    def __init__(
        self,
        access_token: Optional[str],
        phone_number_id: Optional[str],
        base_url: str = "https://graph.facebook.com",
        api_version: str = "v18.0",
        timeout: int = 10,
    ):
        self.base_url = f"{base_url.rstrip('/')}/{api_version}"
        self.phone_number_id = phone_number_id
        self.timeout = timeout
        self.s = requests.Session()
        self.s.headers.update({"Content-Type": "application/json"})
        if access_token:
            self.s.headers.update({"Authorization": f"Bearer {access_token}"})

    @classmethod
    def from_settings(cls, settings: Settings) -> "WhatsAppClient":
        return cls(
            access_token=settings.WHATSAPP_ACCESS_TOKEN,
            phone_number_id=settings.WHATSAPP_PHONE_NUMBER_ID,
            base_url=settings.WHATSAPP_BASE_URL,
            api_version=settings.WHATSAPP_API_VERSION,
            timeout=settings.WHATSAPP_TIMEOUT_SEC,
        )

    def _url(self) -> str:
        return f"{self.base_url}/{self.phone_number_id}/messages"

    def _post(self, data: Dict[str, Any]) -> Any:
        if not self.phone_number_id:
            raise TransportError("WHATSAPP_PHONE_NUMBER_ID is not configured")
        try:
            resp = self.s.post(self._url(), json=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"WhatsApp send failed: {e}") from e
        if not resp.ok:
            raise TransportError(f"WhatsApp send failed: HTTP {resp.status_code} {resp.text[:200]}", resp.status_code)
        try:
            return resp.json()
        except ValueError:
            return None

    def send_text(self, to: str, text: str) -> Any:
        logger.info(f"📤 Sending text to {to} ({len(text)} chars)")
        return self._post({
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": text},
        })

    def send_quick_replies(self, to: str, text: str, options: Sequence[str]) -> Any:
        """Reply buttons (ids ``qr_<index>``); more than 3 options go out as a list message."""
        logger.info(f"📤 Sending {len(options)} quick replies to {to}")
        if len(options) > MAX_REPLY_BUTTONS:
            interactive = {
                "type": "list",
                "body": {"text": text},
                "action": {
                    "button": LIST_BUTTON_LABEL,
                    "sections": [{
                        "title": LIST_SECTION_TITLE,
                        "rows": [
                            {"id": f"qr_{i}", "title": title[:LIST_ROW_TITLE_MAX]}
                            for i, title in enumerate(options)
                        ],
                    }],
                },
            }
        else:
            interactive = {
                "type": "button",
                "body": {"text": text},
                "action": {"buttons": [
                    {"type": "reply", "reply": {"id": f"qr_{i}", "title": title[:BUTTON_TITLE_MAX]}}
                    for i, title in enumerate(options)
                ]},
            }
        return self._post({
            "messaging_product": "whatsapp",
            "to": to,
            "type": "interactive",
            "interactive": interactive,
        })
