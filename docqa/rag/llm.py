from __future__ import annotations

"""LLM clients: prompt text in, completion text out."""

from dataclasses import dataclass
import logging
from typing import Any, Protocol

import httpx

from docqa.rag.errors import ConfigurationError, UpstreamFailure

logger = logging.getLogger(__name__)


class LLMClient(Protocol):
    async def complete(self, prompt: str) -> str:
        ...


@dataclass(frozen=True)
class OllamaClient:
    """LLM client backed by the Ollama generate API."""
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout: float
    transport: httpx.AsyncBaseTransport | None = None

    async def complete(self, prompt: str) -> str:
        """Send the prompt to Ollama and return the raw completion."""
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }
        data = await _post_json(
            f"{self.base_url}/api/generate",
            payload,
            headers=None,
            timeout=self.timeout,
            transport=self.transport,
        )
        content = data.get("response")
        if not isinstance(content, str):
            raise UpstreamFailure("Invalid Ollama response")
        return content


@dataclass(frozen=True)
class OpenAIClient:
    """LLM client backed by OpenAI-compatible chat completions."""
    api_key: str
    base_url: str
    model: str
    temperature: float
    max_tokens: int
    timeout: float
    transport: httpx.AsyncBaseTransport | None = None

    async def complete(self, prompt: str) -> str:
        """Send the prompt as a single user message and return the reply."""
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        data = await _post_json(
            f"{self.base_url}/chat/completions",
            payload,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )
        choices = data.get("choices") or []
        if not choices:
            raise UpstreamFailure("Invalid OpenAI response")
        message = choices[0].get("message") or {}
        content = message.get("content")
        if not isinstance(content, str):
            raise UpstreamFailure("Invalid OpenAI response content")
        return content


async def _post_json(
    url: str,
    payload: dict[str, Any],
    *,
    headers: dict[str, str] | None,
    timeout: float,
    transport: httpx.AsyncBaseTransport | None,
) -> dict[str, Any]:
    """POST a JSON payload once and decode the JSON object reply."""
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
    except httpx.HTTPError as exc:
        raise UpstreamFailure(str(exc) or type(exc).__name__) from exc
    except ValueError as exc:
        raise UpstreamFailure("LLM response is not valid JSON") from exc
    if not isinstance(data, dict):
        raise UpstreamFailure("LLM response is not a JSON object")
    return data


def build_llm_client(
    provider: str,
    *,
    api_key_openai: str | None,
    openai_base_url: str,
    openai_model: str | None,
    ollama_base_url: str,
    ollama_model: str,
    temperature: float,
    max_tokens: int,
    timeout: float,
) -> OllamaClient | OpenAIClient:
    """Factory for LLM clients based on provider."""
    normalized = provider.strip().lower()
    if normalized == "openai":
        if not api_key_openai:
            raise ConfigurationError("OPENAI_API_KEY is required for OpenAI provider")
        if not openai_model:
            raise ConfigurationError("OPENAI_CHAT_MODEL is required for OpenAI provider")
        return OpenAIClient(
            api_key=api_key_openai,
            base_url=openai_base_url.rstrip("/"),
            model=openai_model,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
    if normalized != "ollama":
        logger.warning("llm_provider_unknown", extra={"provider": provider})
    return OllamaClient(
        base_url=ollama_base_url.rstrip("/"),
        model=ollama_model,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=timeout,
    )
