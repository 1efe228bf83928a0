from __future__ import annotations

from typing import Any

from fastapi import Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def _envelope(data: Any, message: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"data": jsonable_encoder(data)}
    if message:
        payload["message"] = message
    return payload


def ok(data: Any, message: str | None = None) -> JSONResponse:
    return JSONResponse(status_code=200, content=_envelope(data, message))


def created(data: Any, message: str | None = None) -> JSONResponse:
    return JSONResponse(status_code=201, content=_envelope(data, message))


def no_content() -> Response:
    return Response(status_code=204)


def fail(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    payload: dict[str, Any] = {"statusCode": status_code, "message": message}
    if error:
        payload["error"] = error
    return JSONResponse(status_code=status_code, content=payload)
