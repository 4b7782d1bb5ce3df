"""
JSON envelopes shared by every route.

Success: {"success": true, "data": ..., "message": "..."} (message optional).
Error:   {"success": false, "error": "..."}.
"""

from __future__ import annotations

from typing import Any, Iterable

from fastapi.responses import JSONResponse


def api_success(data: Any, message: str | None = None, status_code: int = 200) -> JSONResponse:
    content: dict[str, Any] = {"success": True, "data": data}
    if message:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def api_error(error: str, status_code: int = 500) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def format_validation_errors(errors: Iterable[dict[str, Any]]) -> str:
    """
    One issue: "path: message" (or just the message when it has no path).
    Several: "Validation failed: a; b".
    """
    messages = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query")]
        msg = err.get("msg", "Invalid value")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    if len(messages) == 1:
        return messages[0]
    return "Validation failed: " + "; ".join(messages)


def api_validation_error(errors: Iterable[dict[str, Any]], status_code: int = 400) -> JSONResponse:
    return api_error(format_validation_errors(errors), status_code)
