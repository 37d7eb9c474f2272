from __future__ import annotations

"""Grounded prompt assembly for the LLM."""

from typing import Sequence

from docqa.rag.highlights import COMBINED_SNIPPET_CHARS, DEFAULT_SNIPPET_CHARS, extract_snippet
from docqa.rag.types import Document, Evidence, TermSet

REFUSAL_PHRASE = "I don't know"
DOCUMENT_DELIMITER = "\n\n---\n\n"

_GROUNDING_RULES = (
    "Rules:\n"
    "- Use only the document text supplied above.\n"
    f"- If the answer is not present, reply exactly: \"{REFUSAL_PHRASE}\".\n"
    "- Do not use outside knowledge.\n"
    "- Do not make up facts, names, numbers or quotes."
)


def combine_documents(documents: Sequence[Document]) -> str:
    """Join documents under numbered headers separated by a visible delimiter."""
    sections = [
        f"Document {idx} ({document.name}):\n{document.content}"
        for idx, document in enumerate(documents, start=1)
    ]
    return DOCUMENT_DELIMITER.join(sections)


def build_evidence(
    documents: Sequence[Document],
    terms: TermSet,
    snippet_chars: int = DEFAULT_SNIPPET_CHARS,
    combined_snippet_chars: int = COMBINED_SNIPPET_CHARS,
) -> Evidence:
    """Derive the combined text and snippet for the selected documents."""
    selected = tuple(documents)
    if len(selected) == 1:
        combined = selected[0].content
        snippet = extract_snippet(combined, terms, max_chars=snippet_chars)
    else:
        combined = combine_documents(selected)
        snippet = extract_snippet(combined, terms, max_chars=combined_snippet_chars)
    return Evidence(documents=selected, combined_text=combined, snippet=snippet)


def build_prompt(evidence: Evidence, question: str) -> str:
    """Build the instruction text handed to the LLM."""
    label = "Documents:" if evidence.is_multi else "Document:"
    return (
        "Answer the question using ONLY the text below.\n"
        f"If the answer is not present, say \"{REFUSAL_PHRASE}\".\n\n"
        f"{label}\n"
        f"{evidence.combined_text}\n\n"
        "Question:\n"
        f"{question}\n\n"
        f"{_GROUNDING_RULES}\n"
    )
