"""
Shared API error formatting.

All HTTP errors use a consistent response shape:
    {"code": "<machine_readable_code>", "message": "<human_readable_message>"}

``Misconfiguration`` (defined in config_options) is reported with its own
code and a 503 status by the handler in app.py.
"""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from config_options import Misconfiguration

_STATUS_CODE_MAP: dict[int, str] = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    422: "validation_error",
    500: "internal_error",
    503: "service_unavailable",
}


def default_error_code(status_code: int) -> str:
    return _STATUS_CODE_MAP.get(status_code, f"http_{status_code}")


def extract_message(detail: Any) -> str:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, Misconfiguration):
        return str(detail)
    if isinstance(detail, dict):
        message = detail.get("message")
        if isinstance(message, str) and message:
            return message

        reason = detail.get("reason")
        error = detail.get("error")
        if isinstance(error, str) and isinstance(reason, str):
            return f"{error}: {reason}"
        if isinstance(reason, str):
            return reason
        if isinstance(error, str):
            return error
    return str(detail)


def extract_code(status_code: int, detail: Any) -> str:
    if isinstance(detail, Misconfiguration):
        return detail.code
    if isinstance(detail, dict):
        code = detail.get("code")
        if isinstance(code, str) and code:
            return code
    return default_error_code(status_code)


def error_response(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "code": extract_code(status_code, detail),
            "message": extract_message(detail),
        },
    )
