from __future__ import annotations

"""Document persistence: SQL-backed and in-memory stores."""

import itertools
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol
from urllib.parse import urlparse, urlunparse

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    select,
    text,
)
from sqlalchemy.exc import SQLAlchemyError

from docqa.rag.errors import InvalidInput, StoreUnavailable
from docqa.rag.types import Document, DocumentSummary

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    def list_documents(self) -> list[DocumentSummary]:
        ...

    def insert_document(self, name: str | None, content: str | None) -> DocumentSummary:
        ...

    def fetch_all_documents(self) -> list[Document]:
        ...

    def ping(self) -> None:
        ...


def validate_document(name: str | None, content: str | None) -> tuple[str, str]:
    """Reject blank names or contents before anything is written."""
    if not name or not name.strip() or not content or not content.strip():
        raise InvalidInput("Name and content required")
    return name.strip(), content


class SQLDocumentStore:
    """Store documents in a SQL database through SQLAlchemy Core."""
    def __init__(self, connection_uri: str) -> None:
        """Initialize the engine; the table is created on first use."""
        connect_args = {"check_same_thread": False} if connection_uri.startswith("sqlite") else {}
        self._engine = create_engine(connection_uri, connect_args=connect_args)
        self._metadata = MetaData()
        self._table = Table(
            "documents",
            self._metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("name", String(255), nullable=False),
            Column("content", Text, nullable=False),
            Column("created_at", DateTime(timezone=True), nullable=False),
        )
        self._uri = connection_uri
        self._schema_ready = False
        self._schema_lock = threading.Lock()

    def _ensure_schema(self) -> None:
        """Create the documents table once; connection errors surface to the caller."""
        if self._schema_ready:
            return
        with self._schema_lock:
            if self._schema_ready:
                return
            self._metadata.create_all(self._engine)
            self._schema_ready = True
        logger.info("document_store_ready", extra={"uri": self.redact_uri(self._uri)})

    def list_documents(self) -> list[DocumentSummary]:
        """Return id and name of every document, newest first."""
        query = select(self._table.c.id, self._table.c.name).order_by(self._table.c.id.desc())
        try:
            self._ensure_schema()
            with self._engine.connect() as conn:
                rows = conn.execute(query).all()
        except SQLAlchemyError as exc:
            raise StoreUnavailable("Failed to fetch documents") from exc
        return [DocumentSummary(doc_id=str(row.id), name=row.name) for row in rows]

    def insert_document(self, name: str | None, content: str | None) -> DocumentSummary:
        """Insert a document and return its summary."""
        name, content = validate_document(name, content)
        payload = {
            "name": name,
            "content": content,
            "created_at": datetime.now(timezone.utc),
        }
        try:
            self._ensure_schema()
            with self._engine.begin() as conn:
                result = conn.execute(self._table.insert().values(**payload))
                doc_id = result.inserted_primary_key[0]
        except SQLAlchemyError as exc:
            raise StoreUnavailable("Failed to upload document") from exc
        logger.info("document_inserted", extra={"doc_id": doc_id, "content_length": len(content)})
        return DocumentSummary(doc_id=str(doc_id), name=name)

    def fetch_all_documents(self) -> list[Document]:
        """Return every document with full content, oldest first."""
        query = select(
            self._table.c.id, self._table.c.name, self._table.c.content
        ).order_by(self._table.c.id)
        try:
            self._ensure_schema()
            with self._engine.connect() as conn:
                rows = conn.execute(query).all()
        except SQLAlchemyError as exc:
            raise StoreUnavailable("Failed to fetch documents") from exc
        return [
            Document(doc_id=str(row.id), name=row.name, content=row.content)
            for row in rows
        ]

    def ping(self) -> None:
        """Run a trivial query to confirm the database is reachable."""
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise StoreUnavailable("Database unreachable") from exc

    def dispose(self) -> None:
        self._engine.dispose()

    @staticmethod
    def redact_uri(uri: str) -> str:
        """Redact credentials from connection URIs before printing or logging."""
        if "://" not in uri:
            return uri
        parsed = urlparse(uri)
        if parsed.password is None:
            return uri
        netloc = parsed.hostname or ""
        if parsed.username:
            netloc = f"{parsed.username}:***@{netloc}"
        if parsed.port:
            netloc = f"{netloc}:{parsed.port}"
        return urlunparse(
            (
                parsed.scheme,
                netloc,
                parsed.path,
                parsed.params,
                parsed.query,
                parsed.fragment,
            )
        )


@dataclass
class InMemoryDocumentStore:
    """Simple in-memory document store for local testing and demos."""
    documents: list[Document] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def list_documents(self) -> list[DocumentSummary]:
        with self._lock:
            snapshot = list(self.documents)
        return [
            DocumentSummary(doc_id=document.doc_id, name=document.name)
            for document in reversed(snapshot)
        ]

    def insert_document(self, name: str | None, content: str | None) -> DocumentSummary:
        name, content = validate_document(name, content)
        with self._lock:
            document = Document(doc_id=str(next(self._ids)), name=name, content=content)
            self.documents.append(document)
        logger.info(
            "document_inserted",
            extra={"doc_id": document.doc_id, "content_length": len(content)},
        )
        return DocumentSummary(doc_id=document.doc_id, name=document.name)

    def fetch_all_documents(self) -> list[Document]:
        with self._lock:
            return list(self.documents)

    def ping(self) -> None:
        return None
