import json

import httpx
import pytest

from app.core.errors import UpstreamUnavailable
from app.core.text_generation import HTTPTextGenerator


def _generator(handler):
    return HTTPTextGenerator(
        "https://llm.local.test/v1/chat/completions",
        "secret",
        model="test-model",
        transport=httpx.MockTransport(handler),
    )


def test_complete_posts_chat_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"choices": [{"message": {"content": "Category: Leadership"}}]})

    out = _generator(handler).complete("system", "prompt")
    assert out == "Category: Leadership"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"]["model"] == "test-model"
    assert seen["body"]["messages"][0] == {"role": "system", "content": "system"}
    assert seen["body"]["messages"][1] == {"role": "user", "content": "prompt"}


def test_http_error_is_upstream_unavailable():
    gen = _generator(lambda request: httpx.Response(502, text="bad gateway"))
    with pytest.raises(UpstreamUnavailable):
        gen.complete("system", "prompt")


def test_empty_content_is_upstream_unavailable():
    gen = _generator(lambda request: httpx.Response(200, json={"choices": []}))
    with pytest.raises(UpstreamUnavailable):
        gen.complete("system", "prompt")


def test_unconfigured_endpoint():
    with pytest.raises(UpstreamUnavailable) as exc:
        HTTPTextGenerator(None).complete("system", "prompt")
    assert exc.value.status_code == 503
