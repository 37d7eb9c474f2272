from __future__ import annotations

"""CLI utility to bulk insert text files into the configured document store."""

import argparse
from pathlib import Path
from typing import Sequence

from docqa.app.settings import settings
from docqa.rag.errors import InvalidInput
from docqa.store.documents import DocumentStore, SQLDocumentStore


def load_paths(store: DocumentStore, paths: Sequence[Path], pattern: str = "*.txt") -> int:
    """Insert every file (or every pattern match under a directory) as one document."""
    inserted = 0
    for path in paths:
        files = sorted(path.glob(pattern)) if path.is_dir() else [path]
        for file_path in files:
            content = file_path.read_text(encoding="utf-8", errors="ignore")
            try:
                summary = store.insert_document(file_path.stem, content)
            except InvalidInput:
                print(f"Skipping empty file: {file_path}")
                continue
            print(f"Inserted {file_path} as document {summary.doc_id}")
            inserted += 1
    return inserted


def main(argv: Sequence[str] | None = None) -> None:
    """Load text files into the SQL document store named by the app settings."""
    parser = argparse.ArgumentParser(description="Insert text files as documents.")
    parser.add_argument("paths", nargs="+", type=Path, help="Files or directories to load.")
    parser.add_argument(
        "--database-uri",
        default=settings.database_uri,
        help="SQLAlchemy URI of the document database.",
    )
    parser.add_argument(
        "--pattern",
        default="*.txt",
        help="Glob used when a path is a directory.",
    )
    args = parser.parse_args(argv)

    store = SQLDocumentStore(args.database_uri)
    try:
        inserted = load_paths(store, args.paths, pattern=args.pattern)
    finally:
        store.dispose()
    print(f"Inserted {inserted} document(s) into {SQLDocumentStore.redact_uri(args.database_uri)}")


if __name__ == "__main__":
    main()
