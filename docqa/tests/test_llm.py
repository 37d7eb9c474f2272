from __future__ import annotations

"""LLM client tests against mocked HTTP transports."""

import json

import httpx
import pytest

from docqa.rag.errors import ConfigurationError, UpstreamFailure
from docqa.rag.llm import OllamaClient, OpenAIClient, build_llm_client

pytestmark = pytest.mark.anyio


def ollama_client(handler) -> OllamaClient:
    return OllamaClient(
        base_url="http://ollama.test",
        model="llama3.1",
        temperature=0.1,
        max_tokens=64,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


def openai_client(handler) -> OpenAIClient:
    return OpenAIClient(
        api_key="sk-test",
        base_url="http://openai.test/v1",
        model="gpt-test",
        temperature=0.0,
        max_tokens=64,
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


async def test_ollama_complete_posts_prompt() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json={"response": " Blue. "})

    completion = await ollama_client(handler).complete("Document:\nThe sky is blue.")

    assert completion == " Blue. "
    assert seen["path"] == "/api/generate"
    assert seen["payload"]["prompt"] == "Document:\nThe sky is blue."
    assert seen["payload"]["stream"] is False


async def test_openai_complete_sends_bearer_token() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("authorization")
        seen["payload"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": "Blue."}}]},
        )

    completion = await openai_client(handler).complete("prompt text")

    assert completion == "Blue."
    assert seen["auth"] == "Bearer sk-test"
    assert seen["payload"]["messages"] == [{"role": "user", "content": "prompt text"}]


async def test_non_2xx_raises_upstream_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "overloaded"})

    with pytest.raises(UpstreamFailure):
        await ollama_client(handler).complete("prompt")


async def test_timeout_raises_upstream_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamFailure):
        await openai_client(handler).complete("prompt")


async def test_malformed_payloads_raise_upstream_failure() -> None:
    def not_json(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>oops</html>")

    def no_choices(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": []})

    def missing_response(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"done": True})

    with pytest.raises(UpstreamFailure):
        await ollama_client(not_json).complete("prompt")
    with pytest.raises(UpstreamFailure):
        await openai_client(no_choices).complete("prompt")
    with pytest.raises(UpstreamFailure):
        await ollama_client(missing_response).complete("prompt")


def test_build_llm_client_selects_provider() -> None:
    common = dict(
        openai_base_url="https://api.openai.com/v1/",
        ollama_base_url="http://localhost:11434/",
        ollama_model="llama3.1",
        temperature=0.1,
        max_tokens=128,
        timeout=10,
    )

    ollama = build_llm_client("ollama", api_key_openai=None, openai_model=None, **common)
    openai = build_llm_client("OpenAI", api_key_openai="sk", openai_model="gpt", **common)

    assert isinstance(ollama, OllamaClient)
    assert ollama.base_url == "http://localhost:11434"
    assert isinstance(openai, OpenAIClient)
    assert openai.base_url == "https://api.openai.com/v1"


@pytest.mark.parametrize(("api_key", "model"), [(None, "gpt"), ("sk", None)])
def test_build_llm_client_requires_openai_credentials(api_key, model) -> None:
    with pytest.raises(ConfigurationError):
        build_llm_client(
            "openai",
            api_key_openai=api_key,
            openai_base_url="https://api.openai.com/v1",
            openai_model=model,
            ollama_base_url="http://localhost:11434",
            ollama_model="llama3.1",
            temperature=0.1,
            max_tokens=128,
            timeout=10,
        )
