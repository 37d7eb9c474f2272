from __future__ import annotations

"""Query term extraction and whole-word relevance scoring."""

import re
from typing import Iterable

from docqa.rag.types import Document, ScoredDocument, TermSet

MIN_TERM_LENGTH = 3

_SPLIT_RE = re.compile(r"\W+")


def tokenize(question: str) -> TermSet:
    """Return unique lowercase query terms in order of appearance."""
    seen: set[str] = set()
    terms: list[str] = []
    for token in _SPLIT_RE.split(question.lower()):
        if len(token) < MIN_TERM_LENGTH or token in seen:
            continue
        seen.add(token)
        terms.append(token)
    return tuple(terms)


def score(text: str, terms: TermSet) -> int:
    """Count whole-word, case-insensitive occurrences of every term in text."""
    if not text or not terms:
        return 0
    total = 0
    for term in terms:
        pattern = re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)
        total += sum(1 for _ in pattern.finditer(text))
    return total


def score_documents(documents: Iterable[Document], terms: TermSet) -> list[ScoredDocument]:
    """Score documents against terms, keeping input order."""
    return [
        ScoredDocument(document=document, score=score(document.content, terms))
        for document in documents
    ]
