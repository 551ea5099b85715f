from __future__ import annotations

from dataclasses import dataclass, field

import pytest
import requests

from gitie.errors import LlmRequestFailed
from gitie.llm import ChatCompletionClient, clean_ai_output

URL = "http://localhost:12345/v1/chat/completions"


@dataclass(slots=True)
class FakeResponse:
    status_code: int = 200
    payload: object = None
    text: str = ""

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


@dataclass(slots=True)
class FakeSession:
    response: FakeResponse | None = None
    error: Exception | None = None
    requests: list = field(default_factory=list)

    def post(self, url, headers, json, timeout):
        self.requests.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _reply(content):
    return FakeResponse(payload={"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]})


def _complete(session, api_key=None):
    client = ChatCompletionClient(api_url=URL, timeout=5, session=session)
    return client.complete(
        system_prompt="system",
        user_content="user",
        model="mock-model",
        temperature=0.3,
        api_key=api_key,
    )


def test_request_payload_and_reply():
    session = FakeSession(response=_reply("feat: add greeting"))

    assert _complete(session) == "feat: add greeting"

    sent = session.requests[0]
    assert sent["url"] == URL
    assert sent["timeout"] == 5
    assert "Authorization" not in sent["headers"]
    assert sent["json"] == {
        "model": "mock-model",
        "messages": [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ],
        "temperature": 0.3,
        "stream": False,
    }


def test_bearer_token_when_key_set():
    session = FakeSession(response=_reply("ok"))

    _complete(session, api_key="sk-test")

    assert session.requests[0]["headers"]["Authorization"] == "Bearer sk-test"


def test_non_success_status():
    session = FakeSession(response=FakeResponse(status_code=500, text="model not loaded"))

    with pytest.raises(LlmRequestFailed, match="500"):
        _complete(session)


@pytest.mark.parametrize(
    "error",
    [requests.ConnectionError("refused"), requests.Timeout("slow")],
)
def test_transport_errors(error):
    with pytest.raises(LlmRequestFailed):
        _complete(FakeSession(error=error))


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(payload={"choices": []}),
        FakeResponse(payload={"unexpected": True}),
        FakeResponse(payload=ValueError("not json")),
        _reply(""),
        _reply("<think>only thoughts</think>"),
    ],
)
def test_unusable_replies(response):
    with pytest.raises(LlmRequestFailed):
        _complete(FakeSession(response=response))


def test_clean_ai_output():
    assert clean_ai_output("<think>\nhmm\n</think>\n\nfix: typo") == "fix: typo"
    assert clean_ai_output("```\nfeat: x\n```") == "feat: x"
    assert clean_ai_output("  plain  ") == "plain"
