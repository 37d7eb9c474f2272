from __future__ import annotations

"""Selection policies deciding which documents count as evidence."""

import logging
from enum import Enum
from typing import Sequence

from docqa.rag.errors import ConfigurationError
from docqa.rag.terms import score_documents
from docqa.rag.types import Document, TermSet

logger = logging.getLogger(__name__)


class SelectionPolicy(str, Enum):
    """How many documents are fed forward to the LLM."""
    BEST = "best"
    ALL = "all"

    @classmethod
    def parse(cls, value: str) -> "SelectionPolicy":
        normalized = value.strip().lower()
        for policy in cls:
            if policy.value == normalized:
                return policy
        raise ConfigurationError(f"Unsupported selection policy: {value}")


def select(
    documents: Sequence[Document],
    terms: TermSet,
    policy: SelectionPolicy = SelectionPolicy.ALL,
) -> list[Document]:
    """Choose the documents relevant to the query terms."""
    if not terms or not documents:
        return []
    if policy is SelectionPolicy.BEST:
        return select_best(documents, terms)
    return select_all_relevant(documents, terms)


def select_best(documents: Sequence[Document], terms: TermSet) -> list[Document]:
    """Return the single highest scoring document, first seen on ties."""
    best = None
    for scored in score_documents(documents, terms):
        if best is None or scored.score > best.score:
            best = scored
    if best is None or best.score == 0:
        return []
    return [best.document]


def select_all_relevant(documents: Sequence[Document], terms: TermSet) -> list[Document]:
    """Return every document containing at least one term, in store order."""
    relevant: list[Document] = []
    for document in documents:
        lowered = document.content.lower()
        if any(term in lowered for term in terms):
            relevant.append(document)
    return relevant


def cap_evidence(
    documents: Sequence[Document],
    terms: TermSet,
    max_chars: int,
) -> list[Document]:
    """Drop the lowest scoring documents until the combined content fits max_chars.

    Survivors keep their original order. A single document is never dropped,
    even when it alone exceeds the budget.
    """
    kept = list(documents)
    if max_chars <= 0 or len(kept) <= 1:
        return kept
    total = sum(len(document.content) for document in kept)
    if total <= max_chars:
        return kept
    scored = score_documents(kept, terms)
    # Lowest score first; among equal scores the later document goes first.
    drop_order = sorted(
        range(len(scored)),
        key=lambda idx: (scored[idx].score, -idx),
    )
    dropped: set[int] = set()
    for idx in drop_order:
        if total <= max_chars or len(dropped) == len(kept) - 1:
            break
        dropped.add(idx)
        total -= len(kept[idx].content)
    logger.info(
        "evidence_capped",
        extra={
            "selected": len(kept),
            "dropped": len(dropped),
            "max_chars": max_chars,
        },
    )
    return [document for idx, document in enumerate(kept) if idx not in dropped]
