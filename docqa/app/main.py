from __future__ import annotations

"""FastAPI application entrypoint for the grounded document Q&A service."""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from docqa.app.dependencies import get_answer_service, get_store, validate_configuration
from docqa.app.metrics import metrics_middleware, metrics_response, record_outcome
from docqa.app.schemas import (
    AskRequest,
    AskResponse,
    DocumentCreate,
    DocumentCreated,
    DocumentListItem,
    ErrorResponse,
    HealthResponse,
)
from docqa.app.settings import settings
from docqa.rag.errors import InvalidInput, StoreUnavailable, UpstreamFailure
from docqa.rag.service import AnswerService
from docqa.store.documents import DocumentStore

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure root logging using environment settings."""
    level_name = settings.log_level.strip().upper()
    level = getattr(logging, level_name, logging.INFO)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    logger.setLevel(level)


_configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Fail startup on invalid settings rather than on the first request."""
    validate_configuration()
    yield


app = FastAPI(title="Grounded Document Q&A", version="0.1.0", lifespan=lifespan)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", str(uuid.uuid4()))


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Attach or create a request ID for traceability."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.middleware("http")
async def record_metrics(request: Request, call_next):
    """Capture request metrics before returning the response."""
    return await metrics_middleware(request, call_next)


@app.get("/metrics")
async def metrics():
    """Expose Prometheus-style metrics."""
    return metrics_response()


@app.get("/health", response_model=HealthResponse)
async def health(store: DocumentStore = Depends(get_store)):
    """Report backend status and database connectivity."""
    try:
        await asyncio.to_thread(store.ping)
    except StoreUnavailable:
        logger.error("health_check_failed", extra={"component": "database"})
        return JSONResponse(
            status_code=500,
            content=HealthResponse(backend="ok", database="error", llm="unknown").model_dump(),
        )
    return HealthResponse(backend="ok", database="connected", llm=settings.llm_provider)


@app.get("/documents", response_model=list[DocumentListItem])
async def list_documents(http_request: Request, store: DocumentStore = Depends(get_store)):
    """List stored documents, newest first."""
    try:
        summaries = await asyncio.to_thread(store.list_documents)
    except StoreUnavailable as exc:
        logger.error(
            "store_failed",
            extra={"request_id": _request_id(http_request), "detail": str(exc)},
        )
        return _error(500, "Failed to fetch documents")
    return [DocumentListItem(id=summary.doc_id, name=summary.name) for summary in summaries]


@app.post("/documents", response_model=DocumentCreated)
async def upload_document(
    request: DocumentCreate,
    http_request: Request,
    store: DocumentStore = Depends(get_store),
):
    """Store a named text document."""
    try:
        summary = await asyncio.to_thread(store.insert_document, request.name, request.content)
    except InvalidInput as exc:
        return _error(400, str(exc))
    except StoreUnavailable as exc:
        logger.error(
            "store_failed",
            extra={"request_id": _request_id(http_request), "detail": str(exc)},
        )
        return _error(500, "Failed to upload document")
    return DocumentCreated(message="Document uploaded successfully", id=summary.doc_id)


@app.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    http_request: Request,
    service: AnswerService = Depends(get_answer_service),
):
    """Answer a question grounded in the stored documents."""
    request_id = _request_id(http_request)
    logger.info(
        "ask_received",
        extra={
            "request_id": request_id,
            "question_length": len(request.question or ""),
            "policy": service.policy.value,
        },
    )
    try:
        result = await service.answer_question(request.question)
    except InvalidInput as exc:
        return _error(400, str(exc))
    except StoreUnavailable:
        record_outcome("store_unavailable", service.policy.value)
        return _error(503, "Failed to answer question")
    except UpstreamFailure:
        record_outcome("upstream_failure", service.policy.value)
        return _error(502, "Failed to answer question")
    record_outcome(result.refusal_reason or "answered", service.policy.value)
    logger.info(
        "ask_completed",
        extra={
            "request_id": request_id,
            "refusal_reason": result.refusal_reason,
            "answer_length": len(result.answer),
            "source": result.source,
        },
    )
    return AskResponse(answer=result.answer, source=result.source, snippet=result.snippet)
