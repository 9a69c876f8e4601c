# tests/test_api_clients.py
from types import SimpleNamespace

import httpx
import pytest
import requests
from openai import APIStatusError, APITimeoutError

from api_clients import CompletionClient, WhatsAppClient
from constants import MENU_OPTIONS, WELCOME_OPTIONS
from errors import DelegateMalformedResponse, DelegateServiceError, DelegateTimeout, TransportError

URL = "https://graph.test/v18.0/12345/messages"


@pytest.fixture
def wa():
    return WhatsAppClient(access_token="tok", phone_number_id="12345", base_url="https://graph.test/")


def test_send_text(wa, requests_mock):
    requests_mock.post(URL, json={"messages": [{"id": "wamid.1"}]})
    data = wa.send_text("9198", "hello")
    assert data["messages"][0]["id"] == "wamid.1"

    req = requests_mock.last_request
    assert req.headers["Authorization"] == "Bearer tok"
    assert req.json() == {
        "messaging_product": "whatsapp",
        "to": "9198",
        "type": "text",
        "text": {"body": "hello"},
    }


def test_send_reply_buttons(wa, requests_mock):
    requests_mock.post(URL, json={})
    wa.send_quick_replies("9198", "Welcome", WELCOME_OPTIONS)
    interactive = requests_mock.last_request.json()["interactive"]
    assert interactive["type"] == "button"
    buttons = interactive["action"]["buttons"]
    assert [b["reply"]["id"] for b in buttons] == ["qr_0", "qr_1", "qr_2"]
    assert all(len(b["reply"]["title"]) <= 20 for b in buttons)


def test_more_than_three_options_sent_as_list(wa, requests_mock):
    requests_mock.post(URL, json={})
    wa.send_quick_replies("9198", "Menu", MENU_OPTIONS)
    interactive = requests_mock.last_request.json()["interactive"]
    assert interactive["type"] == "list"
    rows = interactive["action"]["sections"][0]["rows"]
    assert [r["id"] for r in rows] == ["qr_0", "qr_1", "qr_2", "qr_3"]


def test_send_error_status(wa, requests_mock):
    requests_mock.post(URL, status_code=500, text="oops")
    with pytest.raises(TransportError) as exc:
        wa.send_text("9198", "hello")
    assert exc.value.status_code == 500


def test_send_network_error(wa, requests_mock):
    requests_mock.post(URL, exc=requests.exceptions.ConnectTimeout)
    with pytest.raises(TransportError):
        wa.send_text("9198", "hello")


def test_send_without_phone_id():
    with pytest.raises(TransportError):
        WhatsAppClient(access_token="tok", phone_number_id=None).send_text("9198", "hello")


# --- completion client ---

class _FakeCompletions:
    def __init__(self, result=None, exc=None):
        self.result = result
        self.exc = exc
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.exc is not None:
            raise self.exc
        return self.result


def _openai(result=None, exc=None):
    completions = _FakeCompletions(result, exc)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


_REQ = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def test_complete_success():
    client, completions = _openai(_response("  Take the Aqua Line.  "))
    cc = CompletionClient(api_key="k", client=client)
    assert cc.complete("Vanaz to PMC", "CONTEXT", timeout=4.0) == "Take the Aqua Line."
    assert completions.kwargs["timeout"] == 4.0
    assert completions.kwargs["messages"][1] == {"role": "user", "content": "CONTEXT"}
    assert completions.kwargs["messages"][0]["role"] == "system"


def test_complete_empty_is_malformed():
    client, _ = _openai(_response(""))
    with pytest.raises(DelegateMalformedResponse):
        CompletionClient(api_key="k", client=client).complete("x", "ctx", 1.0)

    client, _ = _openai(SimpleNamespace(choices=[]))
    with pytest.raises(DelegateMalformedResponse):
        CompletionClient(api_key="k", client=client).complete("x", "ctx", 1.0)


def test_complete_timeout():
    client, _ = _openai(exc=APITimeoutError(request=_REQ))
    with pytest.raises(DelegateTimeout):
        CompletionClient(api_key="k", client=client).complete("x", "ctx", 1.0)


def test_complete_status_error():
    err = APIStatusError("server error", response=httpx.Response(503, request=_REQ), body=None)
    client, _ = _openai(exc=err)
    with pytest.raises(DelegateServiceError) as exc:
        CompletionClient(api_key="k", client=client).complete("x", "ctx", 1.0)
    assert "503" in str(exc.value)


def test_complete_without_key():
    with pytest.raises(DelegateServiceError):
        CompletionClient(api_key=None).complete("x", "ctx", 1.0)
