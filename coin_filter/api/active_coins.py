# coin_filter/api/active_coins.py
from __future__ import annotations

import logging
import os
from typing import Any

from fastapi import APIRouter, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from coin_filter.schemas.market_data import ActiveCoinsResponse
from coin_filter.services.active_coins_store import (
    active_coins_path,
    empty_active_coins,
    read_active_coins,
)

logger = logging.getLogger("coin_filter.api.active_coins")

router = APIRouter(tags=["active-coins"])

ALLOWED_METHODS = ["GET"]


def _response(status_code: int, payload: ActiveCoinsResponse, headers: dict[str, str] | None = None) -> JSONResponse:
    content: dict[str, Any] = payload.model_dump(exclude_unset=True)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def method_not_allowed(method: str) -> JSONResponse:
    return _response(
        405,
        ActiveCoinsResponse(success=False, error=f"Method {method} Not Allowed"),
        headers={"Allow": ", ".join(ALLOWED_METHODS)},
    )


@router.get("/active-coins")
def get_active_coins() -> JSONResponse:
    try:
        data_path = active_coins_path()

        if not os.path.exists(data_path):
            logger.warning("active-coins.json not found, returning empty data | path=%s", data_path)
            return _response(200, ActiveCoinsResponse(success=True, data=empty_active_coins()))

        data = read_active_coins(data_path)
        return _response(200, ActiveCoinsResponse(success=True, data=data))

    except Exception:
        logger.exception("Error reading active-coins.json")
        return _response(500, ActiveCoinsResponse(success=False, error="Failed to read active coins data"))


async def active_coins_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Any method other than GET on /active-coins (HEAD, TRACE, custom verbs...) is
    rejected by routing with a 405; reshape it into the JSON error body.
    Everything else keeps FastAPI's default handling.
    """
    if exc.status_code == 405 and request.scope.get("endpoint") is get_active_coins:
        return method_not_allowed(request.method)
    return await http_exception_handler(request, exc)
