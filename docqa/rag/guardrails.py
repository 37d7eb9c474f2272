from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from docqa.rag.prompts import REFUSAL_PHRASE
from docqa.rag.types import AnswerResult, Document, TermSet

EMPTY_SENTINEL = "-"
NO_DOCUMENTS_ANSWER = "No documents available."
NO_EVIDENCE_ANSWER = (
    f"{REFUSAL_PHRASE}. (The answer is not present in the uploaded documents.)"
)


@dataclass(frozen=True)
class GuardrailResult:
    allowed: bool
    reason: str


def require_documents(documents: Sequence[Document]) -> GuardrailResult:
    if not documents:
        return GuardrailResult(allowed=False, reason="no_documents")
    return GuardrailResult(allowed=True, reason="ok")


def require_evidence(terms: TermSet, selected: Sequence[Document]) -> GuardrailResult:
    if not terms:
        return GuardrailResult(allowed=False, reason="no_terms")
    if not selected:
        return GuardrailResult(allowed=False, reason="no_evidence")
    return GuardrailResult(allowed=True, reason="ok")


def sentinel_result(reason: str) -> AnswerResult:
    """Build the terminal result returned without consulting the LLM."""
    answer = NO_DOCUMENTS_ANSWER if reason == "no_documents" else NO_EVIDENCE_ANSWER
    return AnswerResult(
        answer=answer,
        source=EMPTY_SENTINEL,
        snippet=EMPTY_SENTINEL,
        refusal_reason=reason,
    )
