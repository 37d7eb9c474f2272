from __future__ import annotations

import logging
from functools import lru_cache

from docqa.app.settings import settings
from docqa.rag.llm import LLMClient, build_llm_client
from docqa.rag.service import AnswerService
from docqa.store.documents import DocumentStore, InMemoryDocumentStore, SQLDocumentStore

logger = logging.getLogger(__name__)


@lru_cache
def get_store() -> DocumentStore:
    backend = settings.store_backend.lower().strip()
    if backend == "memory":
        return InMemoryDocumentStore()
    return SQLDocumentStore(settings.database_uri)


@lru_cache
def get_llm_client() -> LLMClient:
    return build_llm_client(
        settings.llm_provider,
        api_key_openai=settings.openai_api_key,
        openai_base_url=settings.openai_base_url,
        openai_model=settings.openai_chat_model,
        ollama_base_url=settings.ollama_base_url,
        ollama_model=settings.ollama_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
    )


@lru_cache
def get_answer_service() -> AnswerService:
    return AnswerService(
        store=get_store(),
        llm=get_llm_client(),
        policy=settings.selection_policy,
        snippet_chars=settings.snippet_max_chars,
        combined_snippet_chars=settings.combined_snippet_max_chars,
        evidence_max_chars=settings.evidence_max_chars,
    )


def validate_configuration() -> AnswerService:
    """Build every component once so bad settings stop startup instead of failing per request."""
    service = get_answer_service()
    logger.info(
        "configuration_validated",
        extra={
            "store": settings.store_backend,
            "llm_provider": settings.llm_provider,
            "policy": service.policy.value,
        },
    )
    return service


def reset_caches() -> None:
    get_answer_service.cache_clear()
    get_store.cache_clear()
    get_llm_client.cache_clear()
