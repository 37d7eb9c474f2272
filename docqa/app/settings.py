from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from docqa.rag.selector import SelectionPolicy

load_dotenv()


@dataclass(frozen=True)
class Settings:
    store_backend: str = os.getenv("RAG_STORE", "sql")
    database_uri: str = os.getenv("RAG_DATABASE_URI", "sqlite:///documents.db")
    selection_policy: SelectionPolicy = SelectionPolicy.parse(os.getenv("RAG_SELECTION_POLICY", "all"))
    snippet_max_chars: int = int(os.getenv("RAG_SNIPPET_MAX_CHARS", "300"))
    combined_snippet_max_chars: int = int(os.getenv("RAG_COMBINED_SNIPPET_MAX_CHARS", "500"))
    evidence_max_chars: int = int(os.getenv("RAG_EVIDENCE_MAX_CHARS", "12000"))
    llm_provider: str = os.getenv("RAG_LLM_PROVIDER", "ollama")
    llm_timeout: float = float(os.getenv("RAG_LLM_TIMEOUT", "60"))
    llm_temperature: float = float(os.getenv("RAG_LLM_TEMPERATURE", "0.1"))
    llm_max_tokens: int = int(os.getenv("RAG_LLM_MAX_TOKENS", "512"))
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3.1")
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_chat_model: str | None = os.getenv("OPENAI_CHAT_MODEL")
    metrics_enabled: bool = os.getenv("RAG_METRICS_ENABLED", "true").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("RAG_LOG_LEVEL", "INFO")


settings = Settings()
