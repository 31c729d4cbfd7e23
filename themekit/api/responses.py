from __future__ import annotations

from typing import Any

from fastapi import Request


def _meta(request: Request) -> dict[str, Any]:
    return {"request_id": getattr(request.state, "request_id", None)}


def success_payload(request: Request, *, data: Any) -> dict[str, Any]:
    return {"data": data, "meta": _meta(request)}


def error_payload(
    request: Request,
    *,
    code: str,
    message: str,
    details: Any | None = None,
) -> dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
        },
        "meta": _meta(request),
    }
