from __future__ import annotations

"""Core data types for documents, evidence and answers."""

from dataclasses import dataclass

TermSet = tuple[str, ...]


@dataclass(frozen=True)
class Document:
    """Stored document with its full content."""
    doc_id: str
    name: str
    content: str


@dataclass(frozen=True)
class DocumentSummary:
    """Listing row for a stored document."""
    doc_id: str
    name: str


@dataclass(frozen=True)
class ScoredDocument:
    """Document paired with its whole-word term count."""
    document: Document
    score: int


@dataclass(frozen=True)
class Evidence:
    """Documents selected for a question plus the text derived from them."""
    documents: tuple[Document, ...]
    combined_text: str
    snippet: str

    @property
    def is_multi(self) -> bool:
        return len(self.documents) > 1

    @property
    def source(self) -> str:
        return ", ".join(document.name for document in self.documents)


@dataclass(frozen=True)
class AnswerResult:
    answer: str
    source: str
    snippet: str
    refusal_reason: str | None = None
