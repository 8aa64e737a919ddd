"""Exception handlers rendering every error as {"error": ..., "details": ...}."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from vlife.api.responses import error_body
from vlife.core.errors import VLifeError


def _validation_issues(exc: RequestValidationError) -> list[dict[str, str]]:
    issues = []
    for error in exc.errors():
        # Drop the "body"/"query" prefix so paths match the request payload keys
        loc = [str(part) for part in error.get("loc", ()) if part not in {"body", "query", "path"}]
        issues.append({"path": ".".join(loc), "message": error.get("msg", "Invalid value")})
    return issues


async def handle_vlife_error(request: Request, exc: VLifeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"[API] {type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
        )
    else:
        logger.info(
            f"[API] {type(exc).__name__} on {request.method} {request.url.path}: {exc.message}",
        )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.details))


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    issues = _validation_issues(exc)
    logger.warning("[API] Request validation failed", method=request.method, path=request.url.path, issues=issues)
    return JSONResponse(status_code=400, content=error_body("Invalid request data", issues))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"[API] Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=error_body("Internal server error", str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VLifeError, handle_vlife_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
