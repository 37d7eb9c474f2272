from __future__ import annotations

from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    question: str | None = None


class AskResponse(BaseModel):
    answer: str
    source: str
    snippet: str


class DocumentCreate(BaseModel):
    name: str | None = None
    content: str | None = None


class DocumentCreated(BaseModel):
    message: str
    id: str


class DocumentListItem(BaseModel):
    id: str
    name: str


class HealthResponse(BaseModel):
    backend: str
    database: str
    llm: str


class ErrorResponse(BaseModel):
    error: str = Field(min_length=1)
