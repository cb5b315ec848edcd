"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Les erreurs du domaine (`LedgerError`) sont traduites en réponses JSON `{code, message, trace_id,
details?}` avec un statut HTTP par famille: introuvable (404), validation (422), conflit (409),
service amont (502).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from tipledger.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_UNPROCESSABLE_ENTITY,
)
from tipledger.domain.errors import (
    ConflictError,
    LedgerError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

log = structlog.get_logger(__name__)


@dataclass
class ErrorEnvelope:
    """Standard error envelope for API responses."""

    code: str
    message: str
    trace_id: str | None = None
    details: dict[str, Any] | None = None


def status_for(exc: LedgerError) -> int:
    """Statut HTTP correspondant à la famille d'erreur du domaine."""
    if isinstance(exc, NotFoundError):
        return HTTP_NOT_FOUND
    if isinstance(exc, ValidationError):
        return HTTP_UNPROCESSABLE_ENTITY
    if isinstance(exc, ConflictError):
        return HTTP_CONFLICT
    if isinstance(exc, UpstreamError):
        return HTTP_BAD_GATEWAY
    return HTTP_INTERNAL_SERVER_ERROR


def create_error_response(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "code": envelope.code,
            "message": envelope.message,
            "trace_id": envelope.trace_id,
            **({"details": envelope.details} if envelope.details else {}),
        },
    )


def extract_trace_id(request: Request) -> str | None:
    """Extract trace ID from request headers or request state."""
    trace_id = request.headers.get("X-Trace-ID")
    if trace_id:
        return trace_id
    return getattr(request.state, "request_id", None)


def handle_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
    """Handle domain errors with standard envelope."""
    status_code = status_for(exc)
    trace_id = extract_trace_id(request)
    log_fn = log.error if status_code >= HTTP_BAD_GATEWAY else log.info
    log_fn("ledger_error", code=exc.code, status_code=status_code, error_message=exc.message)
    details = {k: str(v) for k, v in exc.details.items()} if exc.details else None
    return create_error_response(
        status_code, ErrorEnvelope(exc.code, exc.message, trace_id, details)
    )


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPException with standard envelope."""
    error_codes = {
        HTTP_BAD_REQUEST: "BAD_REQUEST",
        HTTP_NOT_FOUND: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        HTTP_CONFLICT: "CONFLICT",
        HTTP_UNPROCESSABLE_ENTITY: "VALIDATION_ERROR",
        HTTP_INTERNAL_SERVER_ERROR: "INTERNAL_ERROR",
        HTTP_BAD_GATEWAY: "BAD_GATEWAY",
    }
    code = error_codes.get(exc.status_code, "HTTP_ERROR")
    return create_error_response(
        exc.status_code, ErrorEnvelope(code, str(exc.detail), extract_trace_id(request))
    )


def register_error_handlers(app: FastAPI) -> None:
    """Installe les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(LedgerError, handle_ledger_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
