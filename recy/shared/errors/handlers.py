"""
Centralized error handlers for FastAPI.

Every failure, whatever its source, is answered through the
ErrorResponder so that all error responses share one envelope.
No stack traces or internal details are exposed to clients.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recy.domain.audit.errors import AuditDomainError, StorageError
from recy.shared.errors.responder import ErrorResponder


def error_response(
    responder: ErrorResponder, request: Request, failure: object
) -> JSONResponse:
    """Build the JSON error response for a failure on the given request."""
    envelope = responder.respond(failure, request.url.path)
    return JSONResponse(status_code=envelope.status_code, content=envelope.to_wire())


def register_error_handlers(app: FastAPI, responder: ErrorResponder) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
        responder: The responder shared by every handler.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies, paths and queries."""
        return error_response(responder, request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP errors raised by routing, slowapi and route code."""
        return error_response(responder, request, exc)

    @app.exception_handler(AuditDomainError)
    async def handle_audit_domain(
        request: Request, exc: AuditDomainError
    ) -> JSONResponse:
        """Handle domain errors raised outside of a workflow."""
        return error_response(responder, request, exc)

    @app.exception_handler(StorageError)
    async def handle_storage(request: Request, exc: StorageError) -> JSONResponse:
        """Handle record store rejections raised outside of a workflow."""
        return error_response(responder, request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        return error_response(responder, request, exc)
