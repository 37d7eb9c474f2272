from __future__ import annotations

"""Shared pytest fixtures and test environment defaults."""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["RAG_STORE"] = "memory"
os.environ["RAG_SELECTION_POLICY"] = "all"
os.environ["RAG_LLM_PROVIDER"] = "ollama"
os.environ.setdefault("RAG_METRICS_ENABLED", "true")
os.environ.pop("OPENAI_API_KEY", None)


@dataclass
class RecordingLLM:
    """LLM double that records prompts and returns a canned reply."""
    reply: str = "The sky is blue."
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def llm() -> RecordingLLM:
    return RecordingLLM()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
