# coin_filter/api/health.py
from __future__ import annotations

import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, Response

from coin_filter.services.active_coins_store import active_coins_path, read_active_coins

router = APIRouter(tags=["health"])

APP_STARTED_AT = time.time()


def _normalize_ts(value: Any) -> Tuple[Optional[int], Optional[str]]:
    """
    Returns (unix_seconds, iso_z) from an ISO-8601 string.
    Assumes naive strings are UTC.
    """
    if not isinstance(value, str):
        return None, None

    s = value.strip().replace("Z", "+00:00")
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None, None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return int(dt.timestamp()), dt.isoformat().replace("+00:00", "Z")


def _now_meta() -> Dict[str, Any]:
    now_ts = time.time()
    now_dt = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    return {
        "now_unix": int(now_ts),
        "now_iso": now_dt.isoformat().replace("+00:00", "Z"),
        "uptime_s": int(now_ts - APP_STARTED_AT),
    }


def _check_active_coins_file() -> Dict[str, Any]:
    """
    A missing file is the normal "no data yet" state, so it is still ok.
    Only an unreadable or corrupt file fails the check.
    """
    t0 = time.time()
    path = active_coins_path()

    if not os.path.exists(path):
        return {
            "ok": True,
            "present": False,
            "latency_ms": int((time.time() - t0) * 1000),
        }

    try:
        data = read_active_coins(path)
    except Exception as e:
        return {
            "ok": False,
            "present": True,
            "latency_ms": int((time.time() - t0) * 1000),
            "error": type(e).__name__,
        }

    symbols = data.get("symbols") if isinstance(data, dict) else None
    ts_unix, ts_iso = _normalize_ts(data.get("timestamp") if isinstance(data, dict) else None)
    return {
        "ok": True,
        "present": True,
        "latency_ms": int((time.time() - t0) * 1000),
        "symbols": len(symbols) if isinstance(symbols, list) else 0,
        "ts_unix": ts_unix,
        "ts_iso": ts_iso,
    }


@router.get("/live")
async def live():
    return {"status": "ok"}


@router.get("/ready")
async def ready(response: Response):
    payload: Dict[str, Any] = {"status": "ok", **_now_meta()}
    checks = {"active_coins": _check_active_coins_file()}

    degraded_reasons = []
    if not checks["active_coins"]["ok"]:
        degraded_reasons.append("active_coins_unreadable")

    if degraded_reasons:
        payload["status"] = "degraded"
        payload["degraded"] = True
        response.status_code = 503
    else:
        payload["degraded"] = False

    payload["degraded_reasons"] = degraded_reasons
    payload["checks"] = checks
    return payload


@router.get("/health")
async def health(response: Response):
    return await ready(response)
