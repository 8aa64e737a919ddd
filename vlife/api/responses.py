"""Shared response helpers."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "Surrogate-Control": "no-store",
}


def no_store_json(content: Any, status_code: int = 200) -> JSONResponse:
    """JSON response that clients and proxies must not cache."""
    return JSONResponse(content=content, status_code=status_code, headers=NO_STORE_HEADERS)


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return body
