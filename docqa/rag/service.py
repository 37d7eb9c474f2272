from __future__ import annotations

"""Answer orchestration: documents in, grounded LLM answer out."""

import asyncio
import hashlib
import logging
from dataclasses import dataclass

from docqa.rag.errors import InvalidInput, StoreUnavailable, UpstreamFailure
from docqa.rag.guardrails import require_documents, require_evidence, sentinel_result
from docqa.rag.highlights import COMBINED_SNIPPET_CHARS, DEFAULT_SNIPPET_CHARS
from docqa.rag.llm import LLMClient
from docqa.rag.prompts import build_evidence, build_prompt
from docqa.rag.selector import SelectionPolicy, cap_evidence, select
from docqa.rag.terms import tokenize
from docqa.rag.types import AnswerResult, Document
from docqa.store.documents import DocumentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnswerService:
    store: DocumentStore
    llm: LLMClient
    policy: SelectionPolicy = SelectionPolicy.ALL
    snippet_chars: int = DEFAULT_SNIPPET_CHARS
    combined_snippet_chars: int = COMBINED_SNIPPET_CHARS
    evidence_max_chars: int = 12000

    async def answer_question(self, question: str | None) -> AnswerResult:
        """Answer a question from stored documents, or refuse without calling the LLM."""
        if not question or not question.strip():
            raise InvalidInput("Question is required")
        query_hash = hashlib.sha256(question.encode("utf-8")).hexdigest()[:12]

        documents = await self._fetch_documents()
        guardrail = require_documents(documents)
        if not guardrail.allowed:
            logger.info("ask_refused", extra={"query_hash": query_hash, "reason": guardrail.reason})
            return sentinel_result(guardrail.reason)

        terms = tokenize(question)
        selected = select(documents, terms, self.policy)
        guardrail = require_evidence(terms, selected)
        if not guardrail.allowed:
            logger.info(
                "ask_refused",
                extra={
                    "query_hash": query_hash,
                    "reason": guardrail.reason,
                    "documents": len(documents),
                    "terms": len(terms),
                },
            )
            return sentinel_result(guardrail.reason)

        selected = cap_evidence(selected, terms, self.evidence_max_chars)
        evidence = build_evidence(
            selected,
            terms,
            snippet_chars=self.snippet_chars,
            combined_snippet_chars=self.combined_snippet_chars,
        )
        prompt = build_prompt(evidence, question)
        logger.info(
            "evidence_selected",
            extra={
                "query_hash": query_hash,
                "policy": self.policy.value,
                "documents": len(documents),
                "selected": len(evidence.documents),
                "prompt_length": len(prompt),
            },
        )

        answer = await self._complete(prompt, query_hash)
        return AnswerResult(answer=answer, source=evidence.source, snippet=evidence.snippet)

    async def _fetch_documents(self) -> list[Document]:
        try:
            return await asyncio.to_thread(self.store.fetch_all_documents)
        except StoreUnavailable:
            logger.error("store_failed", extra={"operation": "fetch_all_documents"})
            raise

    async def _complete(self, prompt: str, query_hash: str) -> str:
        try:
            completion = await self.llm.complete(prompt)
        except Exception as exc:
            logger.error(
                "llm_failed",
                extra={"query_hash": query_hash, "detail": type(exc).__name__},
            )
            if isinstance(exc, UpstreamFailure):
                raise
            raise UpstreamFailure(str(exc) or type(exc).__name__) from exc
        answer = completion.strip()
        if not answer:
            logger.error("llm_failed", extra={"query_hash": query_hash, "detail": "empty_answer"})
            raise UpstreamFailure("LLM returned an empty answer")
        return answer
